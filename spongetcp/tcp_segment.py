"""A TCP segment: header plus payload, with checksum handling."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from .buffer import Buffer, BufferList
from .parser import NetParser, ParseError, ParseResult
from .tcp_header import TCPHeader
from .util import InternetChecksum

__all__ = ["TCPSegment"]


def _as_bytes(data: object) -> bytes:
    if isinstance(data, str):
        return data.encode("latin-1")
    return bytes(data)  # type: ignore[call-overload]


@dataclass
class TCPSegment:
    """A TCP header together with its payload."""

    header: TCPHeader = field(default_factory=TCPHeader)
    payload: Buffer = field(default_factory=Buffer)

    @classmethod
    def parse(cls, data: object, datagram_layer_checksum: int = 0) -> "TCPSegment":
        """Parse a segment, verifying its checksum.

        ``datagram_layer_checksum`` is the pseudo-header sum of the lower layer.
        Raises ParseError on a bad checksum or malformed header.
        """
        raw = _as_bytes(data)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(raw)
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)

        parser = NetParser(raw)
        header = TCPHeader.parse(parser)
        payload = parser.buffer()
        parser.check()
        return cls(header=header, payload=payload)

    def serialize(self, datagram_layer_checksum: int = 0) -> BufferList:
        """The segment in wire format with a freshly computed checksum."""
        header_out = replace(self.header, cksum=0)
        check = InternetChecksum(datagram_layer_checksum)
        check.add(header_out.serialize())
        check.add(bytes(self.payload))
        header_out.cksum = check.value()

        out = BufferList(header_out.serialize())
        out.append(self.payload)
        return out

    def length_in_sequence_space(self) -> int:
        """Payload length plus one for SYN and one for FIN."""
        return len(self.payload) + int(self.header.syn) + int(self.header.fin)