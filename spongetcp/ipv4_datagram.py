"""An IPv4 datagram: header plus payload."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .buffer import BufferList
from .ipv4_header import IPv4Header
from .parser import NetParser, ParseError, ParseResult
from .util import InternetChecksum

__all__ = ["IPv4Datagram", "InternetDatagram"]


def _as_bytes(data: object) -> bytes:
    if isinstance(data, str):
        return data.encode("latin-1")
    return bytes(data)  # type: ignore[call-overload]


@dataclass(eq=False)
class IPv4Datagram:
    """An IPv4 header together with its payload."""

    header: IPv4Header = field(default_factory=IPv4Header)
    payload: BufferList = field(default_factory=BufferList)

    @classmethod
    def parse(cls, data: object) -> "IPv4Datagram":
        """Parse a datagram; raises ParseError if it is malformed."""
        parser = NetParser(_as_bytes(data))
        header = IPv4Header.parse(parser)
        payload = BufferList(parser.buffer())
        if len(payload) != header.payload_length():
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        parser.check()
        return cls(header=header, payload=payload)

    def serialize(self) -> BufferList:
        """The datagram in wire format with a freshly computed header checksum."""
        if len(self.payload) != self.header.payload_length():
            raise ValueError("IPv4Datagram.serialize: payload is wrong size")

        header_out = replace(self.header, cksum=0)
        check = InternetChecksum()
        check.add(header_out.serialize())
        header_out.cksum = check.value()

        out = BufferList(header_out.serialize())
        out.append(self.payload)
        return out


InternetDatagram = IPv4Datagram