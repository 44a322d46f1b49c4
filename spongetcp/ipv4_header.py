"""The IPv4 datagram header: parsing, serialization and display."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import ClassVar

from .parser import NetParser, ParseError, ParseResult
from .util import InternetChecksum

__all__ = ["IPv4Header"]

_FIXED = struct.Struct("!BBHHHBBHII")


def _bool(flag: bool) -> str:
    return "true" if flag else "false"


@dataclass
class IPv4Header:
    """An IPv4 header; options are not supported and are skipped when parsing."""

    LENGTH: ClassVar[int] = 20
    DEFAULT_TTL: ClassVar[int] = 128
    PROTO_TCP: ClassVar[int] = 6

    ver: int = 4
    hlen: int = LENGTH // 4
    tos: int = 0
    total_length: int = 0
    ident: int = 0
    df: bool = True
    mf: bool = False
    offset: int = 0
    ttl: int = DEFAULT_TTL
    proto: int = PROTO_TCP
    cksum: int = 0
    src: int = 0
    dst: int = 0

    @classmethod
    def parse(cls, parser: NetParser) -> "IPv4Header":
        """Read and validate a header from ``parser``.

        The parser must hold the whole datagram. Raises ParseError if it is
        too short, has the wrong version or header length, disagrees with the
        length field, or fails the header checksum.
        """
        original = bytes(parser.buffer())
        size = len(original)
        if size < cls.LENGTH:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)

        first = parser.u8()
        ver = first >> 4
        hlen = first & 0x0F
        tos = parser.u8()
        total_length = parser.u16()
        ident = parser.u16()
        fo_val = parser.u16()
        ttl = parser.u8()
        proto = parser.u8()
        cksum = parser.u16()
        src = parser.u32()
        dst = parser.u32()

        if size < 4 * hlen:
            raise ParseError(ParseResult.PACKET_TOO_SHORT)
        if ver != 4:
            raise ParseError(ParseResult.WRONG_IP_VERSION)
        if hlen < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)
        if size != total_length:
            raise ParseError(ParseResult.TRUNCATED_PACKET)

        parser.remove_prefix(hlen * 4 - cls.LENGTH)
        parser.check()

        check = InternetChecksum()
        check.add(original[: 4 * hlen])
        if check.value():
            raise ParseError(ParseResult.BAD_CHECKSUM)

        return cls(
            ver=ver,
            hlen=hlen,
            tos=tos,
            total_length=total_length,
            ident=ident,
            df=bool(fo_val & 0x4000),
            mf=bool(fo_val & 0x2000),
            offset=fo_val & 0x1FFF,
            ttl=ttl,
            proto=proto,
            cksum=cksum,
            src=src,
            dst=dst,
        )

    def serialize(self) -> bytes:
        """The header in wire format, padded to ``4 * hlen`` bytes.

        The checksum field is written as it stands, not recomputed.
        """
        if self.ver != 4:
            raise ValueError("wrong IP version")
        if 4 * self.hlen < self.LENGTH:
            raise ValueError("IP header too short")

        fo_val = (0x4000 if self.df else 0) | (0x2000 if self.mf else 0) | (self.offset & 0x1FFF)
        fixed = _FIXED.pack(
            ((self.ver << 4) | (self.hlen & 0x0F)) & 0xFF,
            self.tos & 0xFF,
            self.total_length & 0xFFFF,
            self.ident & 0xFFFF,
            fo_val,
            self.ttl & 0xFF,
            self.proto & 0xFF,
            self.cksum & 0xFFFF,
            self.src & 0xFFFFFFFF,
            self.dst & 0xFFFFFFFF,
        )
        return fixed.ljust(4 * self.hlen, b"\x00")[: 4 * self.hlen]

    def payload_length(self) -> int:
        """Bytes in the datagram after the header."""
        return (self.total_length - 4 * self.hlen) & 0xFFFF

    def pseudo_cksum(self) -> int:
        """The pseudo-header's contribution to an encapsulated TCP checksum."""
        total = (self.src >> 16) + (self.src & 0xFFFF)
        total += (self.dst >> 16) + (self.dst & 0xFFFF)
        total += self.proto
        total += self.payload_length()
        return total & 0xFFFFFFFF

    def to_string(self) -> str:
        """Every field on its own line, numbers in hexadecimal."""
        return (
            f"IP version: {self.ver:x}\n"
            f"IP hdr len: {self.hlen:x}\n"
            f"IP tos: {self.tos:x}\n"
            f"IP dgram len: {self.total_length:x}\n"
            f"IP id: {self.ident:x}\n"
            f"Flags: df: {_bool(self.df)} mf: {_bool(self.mf)}\n"
            f"Offset: {self.offset:x}\n"
            f"TTL: {self.ttl:x}\n"
            f"Protocol: {self.proto:x}\n"
            f"Checksum: {self.cksum:x}\n"
            f"Src addr: {self.src:x}\n"
            f"Dst addr: {self.dst:x}\n"
        )