"""Network-byte-order parsing of packet headers."""

from __future__ import annotations

from enum import Enum

from .buffer import Buffer

__all__ = ["ParseResult", "ParseError", "NetParser"]


class ParseResult(Enum):
    """Outcome of parsing an IP datagram or TCP segment."""

    NO_ERROR = 0
    BAD_CHECKSUM = 1
    PACKET_TOO_SHORT = 2
    WRONG_IP_VERSION = 3
    HEADER_TOO_SHORT = 4
    TRUNCATED_PACKET = 5

    def __str__(self) -> str:
        return _NAMES[self]


_NAMES = {
    ParseResult.NO_ERROR: "NoError",
    ParseResult.BAD_CHECKSUM: "BadChecksum",
    ParseResult.PACKET_TOO_SHORT: "PacketTooShort",
    ParseResult.WRONG_IP_VERSION: "WrongIPVersion",
    ParseResult.HEADER_TOO_SHORT: "HeaderTooShort",
    ParseResult.TRUNCATED_PACKET: "TruncatedPacket",
}


class ParseError(ValueError):
    """Raised when a packet cannot be parsed."""

    def __init__(self, result: ParseResult) -> None:
        super().__init__(str(result))
        self.result = result


class NetParser:
    """Reads big-endian integers from the front of a Buffer.

    The first failure is remembered; after it every read yields zero.
    """

    def __init__(self, buffer: object) -> None:
        self._buffer = Buffer(buffer)  # type: ignore[arg-type]
        self._error = ParseResult.NO_ERROR

    def buffer(self) -> Buffer:
        """The unread remainder."""
        return Buffer(self._buffer)

    def error(self) -> ParseResult:
        """The result of parsing so far."""
        return self._error

    def set_error(self, result: ParseResult) -> None:
        self._error = result

    def check(self) -> None:
        """Raise ParseError if an error has been recorded."""
        if self._error is not ParseResult.NO_ERROR:
            raise ParseError(self._error)

    def _check_size(self, size: int) -> None:
        if size > len(self._buffer):
            self._error = ParseResult.PACKET_TOO_SHORT

    def _parse_int(self, size: int) -> int:
        self._check_size(size)
        if self._error is not ParseResult.NO_ERROR:
            return 0
        value = int.from_bytes(self._buffer[:size], "big")
        self._buffer.remove_prefix(size)
        return value

    def u8(self) -> int:
        return self._parse_int(1)

    def u16(self) -> int:
        return self._parse_int(2)

    def u32(self) -> int:
        return self._parse_int(4)

    def remove_prefix(self, n: int) -> None:
        """Skip ``n`` bytes, recording an error if there are too few."""
        self._check_size(n)
        if self._error is not ParseResult.NO_ERROR:
            return
        self._buffer.remove_prefix(n)