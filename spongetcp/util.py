"""Internet checksum, a monotonic millisecond clock and a hexdump helper."""

from __future__ import annotations

import sys
import time

__all__ = ["InternetChecksum", "timestamp_ms", "hexdump"]

_PROGRAM_START_NS = time.monotonic_ns()


def timestamp_ms() -> int:
    """Milliseconds elapsed since this module was loaded."""
    return (time.monotonic_ns() - _PROGRAM_START_NS) // 1_000_000


def _as_bytes(data: object) -> bytes:
    if isinstance(data, str):
        return data.encode("latin-1")
    return bytes(data)  # type: ignore[call-overload]


class InternetChecksum:
    """Accumulates the ones'-complement Internet checksum over byte strings.

    A correctly checksummed header or segment yields a value of zero.
    """

    def __init__(self, initial_sum: int = 0) -> None:
        self._sum = initial_sum & 0xFFFFFFFF
        self._parity = False

    def add(self, data: object) -> None:
        """Add bytes to the running sum, continuing from the previous alignment."""
        raw = _as_bytes(data)
        if not raw:
            return
        if self._parity:
            high, low = raw[1::2], raw[0::2]
        else:
            high, low = raw[0::2], raw[1::2]
        self._sum = (self._sum + (sum(high) << 8) + sum(low)) & 0xFFFFFFFF
        if len(raw) % 2:
            self._parity = not self._parity

    def value(self) -> int:
        """The folded, complemented 16-bit checksum."""
        total = self._sum
        while total > 0xFFFF:
            total = (total >> 16) + (total & 0xFFFF)
        return ~total & 0xFFFF


def _printable(byte: int) -> str:
    return chr(byte) if 0x20 <= byte <= 0x7E else "."


def hexdump(data: object, indent: int = 0) -> None:
    """Write a hex and ASCII dump of ``data`` to standard output."""
    raw = _as_bytes(data)
    pad = " " * indent
    parts: list[str] = []
    chars = ""
    for printed, byte in enumerate(raw):
        if printed % 16 == 0:
            if printed:
                parts.append("    " + (chars or " ") + "\n")
                chars = ""
            parts.append(f"{pad}{printed:08x}:    ")
        elif printed % 2 == 0:
            parts.append(" ")
        parts.append(f"{byte:02x}")
        chars += _printable(byte)
    remainder = (16 - len(raw) % 16) % 16
    parts.append(" " * (2 * remainder + remainder // 2 + 4) + (chars or " "))
    parts.append("\n\n")
    sys.stdout.write("".join(parts))
    sys.stdout.flush()