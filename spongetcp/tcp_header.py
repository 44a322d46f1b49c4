"""The TCP segment header: parsing, serialization and display."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

from .parser import NetParser, ParseError, ParseResult
from .wrapping_integers import WrappingInt32

__all__ = ["TCPHeader"]

_FIXED = struct.Struct("!HHIIBBHHH")

_URG = 0b0010_0000
_ACK = 0b0001_0000
_PSH = 0b0000_1000
_RST = 0b0000_0100
_SYN = 0b0000_0010
_FIN = 0b0000_0001


@dataclass(eq=False)
class TCPHeader:
    """A TCP header; options are not supported and are skipped when parsing."""

    LENGTH: ClassVar[int] = 20

    sport: int = 0
    dport: int = 0
    seqno: WrappingInt32 = field(default_factory=lambda: WrappingInt32(0))
    ackno: WrappingInt32 = field(default_factory=lambda: WrappingInt32(0))
    doff: int = LENGTH // 4
    urg: bool = False
    ack: bool = False
    psh: bool = False
    rst: bool = False
    syn: bool = False
    fin: bool = False
    win: int = 0
    cksum: int = 0
    uptr: int = 0

    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def parse(cls, parser: NetParser) -> "TCPHeader":
        """Read a header from ``parser``, leaving it positioned at the payload.

        Raises ParseError if the data is too short or ``doff`` is below 5.
        """
        sport = parser.u16()
        dport = parser.u16()
        seqno = WrappingInt32(parser.u32())
        ackno = WrappingInt32(parser.u32())
        doff = parser.u8() >> 4
        flags = parser.u8()
        win = parser.u16()
        cksum = parser.u16()
        uptr = parser.u16()
        parser.check()

        if doff < 5:
            raise ParseError(ParseResult.HEADER_TOO_SHORT)

        parser.remove_prefix(doff * 4 - cls.LENGTH)
        parser.check()

        return cls(
            sport=sport,
            dport=dport,
            seqno=seqno,
            ackno=ackno,
            doff=doff,
            urg=bool(flags & _URG),
            ack=bool(flags & _ACK),
            psh=bool(flags & _PSH),
            rst=bool(flags & _RST),
            syn=bool(flags & _SYN),
            fin=bool(flags & _FIN),
            win=win,
            cksum=cksum,
            uptr=uptr,
        )

    def _flag_byte(self) -> int:
        return (
            (_URG if self.urg else 0)
            | (_ACK if self.ack else 0)
            | (_PSH if self.psh else 0)
            | (_RST if self.rst else 0)
            | (_SYN if self.syn else 0)
            | (_FIN if self.fin else 0)
        )

    def serialize(self) -> bytes:
        """The header in wire format, padded to ``4 * doff`` bytes.

        The checksum field is written as it stands, not recomputed.
        """
        if self.doff < 5:
            raise ValueError("TCP header too short")
        fixed = _FIXED.pack(
            self.sport & 0xFFFF,
            self.dport & 0xFFFF,
            self.seqno.raw_value,
            self.ackno.raw_value,
            (self.doff << 4) & 0xFF,
            self._flag_byte(),
            self.win & 0xFFFF,
            self.cksum & 0xFFFF,
            self.uptr & 0xFFFF,
        )
        return fixed.ljust(4 * self.doff, b"\x00")

    def to_string(self) -> str:
        """Every field on its own line, numbers in hexadecimal."""
        urg, ack, psh, rst, syn, fin = (
            str(bool(flag)).lower()
            for flag in (self.urg, self.ack, self.psh, self.rst, self.syn, self.fin)
        )
        return (
            f"TCP source port: {self.sport:x}\n"
            f"TCP dest port: {self.dport:x}\n"
            f"TCP seqno: {self.seqno.raw_value:x}\n"
            f"TCP ackno: {self.ackno.raw_value:x}\n"
            f"TCP doff: {self.doff:x}\n"
            f"Flags: urg: {urg} ack: {ack} psh: {psh}"
            f" rst: {rst} syn: {syn} fin: {fin}\n"
            f"TCP winsize: {self.win:x}\n"
            f"TCP cksum: {self.cksum:x}\n"
            f"TCP uptr: {self.uptr:x}\n"
        )

    def summary(self) -> str:
        """A one-line summary of flags, seqno, ackno and window."""
        flags = (
            ("S" if self.syn else "")
            + ("A" if self.ack else "")
            + ("R" if self.rst else "")
            + ("F" if self.fin else "")
        )
        return f"Header(flags={flags},seqno={self.seqno},ack={self.ackno},win={self.win})"

    def __eq__(self, other: object) -> bool:
        """Compare every field except the ports and the checksum."""
        if not isinstance(other, TCPHeader):
            return NotImplemented
        return (
            self.seqno == other.seqno
            and self.ackno == other.ackno
            and self.doff == other.doff
            and self.urg == other.urg
            and self.ack == other.ack
            and self.psh == other.psh
            and self.rst == other.rst
            and self.syn == other.syn
            and self.fin == other.fin
            and self.win == other.win
            and self.uptr == other.uptr
        )