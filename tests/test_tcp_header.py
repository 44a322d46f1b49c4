import pytest
from hypothesis import given
from hypothesis import strategies as st

from spongetcp.parser import NetParser, ParseError, ParseResult
from spongetcp.tcp_header import TCPHeader
from spongetcp.wrapping_integers import WrappingInt32


def _parse(data: bytes) -> TCPHeader:
    return TCPHeader.parse(NetParser(data))


def test_default_serializes_to_fixed_length():
    assert len(TCPHeader().serialize()) == TCPHeader.LENGTH


def test_data_offset_byte_on_wire():
    assert TCPHeader().serialize()[12] == 0x50


def test_syn_flag_bit_on_wire():
    assert TCPHeader(syn=True).serialize()[13] == 0x02


def test_fin_flag_bit_on_wire():
    assert TCPHeader(fin=True).serialize()[13] == 0x01


def test_round_trip_all_fields():
    header = TCPHeader(
        sport=1234,
        dport=80,
        seqno=WrappingInt32(123456789),
        ackno=WrappingInt32(987654321),
        urg=True,
        ack=True,
        psh=True,
        rst=False,
        syn=True,
        fin=False,
        win=4096,
        cksum=777,
        uptr=3,
    )
    parsed = _parse(header.serialize())
    assert parsed == header
    assert parsed.sport == 1234
    assert parsed.dport == 80
    assert parsed.cksum == 777


def test_options_are_skipped():
    header = TCPHeader(doff=6, win=10)
    wire = header.serialize()
    assert len(wire) == 24
    parser = NetParser(wire + b"payload")
    parsed = TCPHeader.parse(parser)
    assert parsed.doff == 6
    assert parsed.win == 10
    assert bytes(parser.buffer()) == b"payload"


def test_serialize_rejects_short_doff():
    with pytest.raises(ValueError):
        TCPHeader(doff=4).serialize()


def test_parse_short_data():
    with pytest.raises(ParseError) as info:
        _parse(b"\x00" * 10)
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_parse_doff_below_minimum():
    wire = bytearray(TCPHeader().serialize())
    wire[12] = 0x40
    with pytest.raises(ParseError) as info:
        _parse(bytes(wire))
    assert info.value.result is ParseResult.HEADER_TOO_SHORT


def test_parse_doff_beyond_data():
    wire = bytearray(TCPHeader().serialize())
    wire[12] = 0xF0
    with pytest.raises(ParseError) as info:
        _parse(bytes(wire))
    assert info.value.result is ParseResult.PACKET_TOO_SHORT


def test_summary():
    header = TCPHeader(syn=True, ack=True, seqno=WrappingInt32(5), ackno=WrappingInt32(7), win=100)
    assert header.summary() == "Header(flags=SA,seqno=5,ack=7,win=100)"


def test_summary_without_flags():
    assert TCPHeader(rst=False).summary() == "Header(flags=,seqno=0,ack=0,win=0)"


def test_to_string_lists_flags():
    text = TCPHeader(ack=True).to_string()
    assert "Flags: urg: false ack: true psh: false rst: false syn: false fin: false\n" in text
    assert text.startswith("TCP source port: 0\n")


def test_equality_ignores_ports_and_checksum():
    assert TCPHeader(sport=1, dport=2, cksum=3) == TCPHeader()


def test_equality_sees_window():
    assert not (TCPHeader(win=1) == TCPHeader())


@given(
    sport=st.integers(0, 0xFFFF),
    dport=st.integers(0, 0xFFFF),
    seqno=st.integers(0, 0xFFFFFFFF),
    ackno=st.integers(0, 0xFFFFFFFF),
    doff=st.integers(5, 15),
    flags=st.lists(st.booleans(), min_size=6, max_size=6),
    win=st.integers(0, 0xFFFF),
    uptr=st.integers(0, 0xFFFF),
)
def test_round_trip_property(sport, dport, seqno, ackno, doff, flags, win, uptr):
    urg, ack, psh, rst, syn, fin = flags
    header = TCPHeader(
        sport=sport,
        dport=dport,
        seqno=WrappingInt32(seqno),
        ackno=WrappingInt32(ackno),
        doff=doff,
        urg=urg,
        ack=ack,
        psh=psh,
        rst=rst,
        syn=syn,
        fin=fin,
        win=win,
        uptr=uptr,
    )
    wire = header.serialize()
    assert len(wire) == 4 * doff
    parsed = _parse(wire)
    assert parsed == header
    assert (parsed.sport, parsed.dport) == (sport, dport)