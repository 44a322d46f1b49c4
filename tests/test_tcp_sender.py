import pytest

from spongetcp.buffer import Buffer
from spongetcp.tcp_config import TCPConfig
from spongetcp.tcp_header import TCPHeader
from spongetcp.tcp_segment import TCPSegment
from spongetcp.tcp_sender import RetransmissionQueue, TCPSender
from spongetcp.wrapping_integers import WrappingInt32

ISN = WrappingInt32(1000)
RTO = 100


def connected_sender(window=1000):
    sender = TCPSender(retx_timeout=RTO, fixed_isn=ISN)
    sender.fill_window()
    sender.segments_out().popleft()
    assert sender.ack_received(ISN + 1, window)
    return sender


def test_first_fill_sends_syn():
    sender = TCPSender(fixed_isn=ISN)
    assert sender.next_seqno_absolute() == 0
    sender.fill_window()
    seg = sender.segments_out().popleft()
    assert seg.header.syn
    assert seg.header.seqno == ISN
    assert sender.bytes_in_flight() == 1
    assert sender.next_seqno_absolute() == 1
    assert not sender.segments_out()


def test_random_isn_matches_syn_seqno():
    sender = TCPSender()
    isn = sender.next_seqno()
    sender.fill_window()
    assert sender.segments_out().popleft().header.seqno == isn


def test_ack_of_syn_clears_flight():
    sender = connected_sender()
    assert sender.bytes_in_flight() == 0
    assert sender.next_seqno() == ISN + 1


def test_ack_beyond_sent_is_rejected():
    sender = TCPSender(fixed_isn=ISN)
    sender.fill_window()
    assert sender.ack_received(ISN + 2, 1000) is False
    assert sender.bytes_in_flight() == 1


def test_data_is_sent_after_syn():
    sender = connected_sender()
    sender.stream_in().write(b"hello")
    sender.fill_window()
    seg = sender.segments_out().popleft()
    assert bytes(seg.payload) == b"hello"
    assert seg.header.seqno == ISN + 1
    assert not seg.header.fin
    assert sender.bytes_in_flight() == len(b"hello")


def test_large_write_is_split_by_max_payload():
    data = bytes(range(256)) * 12
    sender = connected_sender(window=4000)
    sender.stream_in().write(data)
    sender.fill_window()
    segs = list(sender.segments_out())
    assert len(segs[0].payload) == TCPConfig.MAX_PAYLOAD_SIZE
    assert all(len(s.payload) <= TCPConfig.MAX_PAYLOAD_SIZE for s in segs)
    assert b"".join(bytes(s.payload) for s in segs) == data
    assert sender.bytes_in_flight() == len(data)


def test_window_limits_data():
    sender = connected_sender(window=2)
    sender.stream_in().write(b"abcd")
    sender.fill_window()
    segs = list(sender.segments_out())
    assert [bytes(s.payload) for s in segs] == [b"ab"]


def test_fin_alone_after_end_input():
    sender = connected_sender()
    sender.stream_in().end_input()
    sender.fill_window()
    seg = sender.segments_out().popleft()
    assert seg.header.fin
    assert seg.length_in_sequence_space() == 1
    sender.fill_window()
    assert not sender.segments_out()


def test_fin_piggybacks_on_data():
    sender = connected_sender()
    sender.stream_in().write(b"abc")
    sender.stream_in().end_input()
    sender.fill_window()
    segs = list(sender.segments_out())
    assert len(segs) == 1
    assert segs[0].header.fin
    assert bytes(segs[0].payload) == b"abc"


def test_retransmission_with_backoff():
    sender = TCPSender(retx_timeout=RTO, fixed_isn=ISN)
    sender.fill_window()
    sender.segments_out().popleft()
    sender.tick(RTO - 1)
    assert not sender.segments_out()
    sender.tick(1)
    assert sender.segments_out().popleft().header.syn
    assert sender.consecutive_retransmissions() == 1
    sender.tick(2 * RTO - 1)
    assert not sender.segments_out()
    sender.tick(1)
    assert sender.segments_out().popleft().header.syn
    assert sender.consecutive_retransmissions() == 2
    assert sender.ack_received(ISN + 1, 1000)
    assert sender.consecutive_retransmissions() == 0


def test_retransmitted_segment_is_an_independent_copy():
    sender = connected_sender()
    sender.stream_in().write(b"xyz")
    sender.fill_window()
    sent = sender.segments_out().popleft()
    sent.header.ack = True
    sender.tick(RTO)
    again = sender.segments_out().popleft()
    assert bytes(again.payload) == b"xyz"
    assert not again.header.ack


def test_empty_segment_takes_no_sequence_space():
    sender = connected_sender()
    sender.send_empty_segment()
    seg = sender.segments_out().popleft()
    assert seg.length_in_sequence_space() == 0
    assert seg.header.seqno == sender.next_seqno()
    assert sender.bytes_in_flight() == 0


def make_seg(payload):
    return TCPSegment(header=TCPHeader(), payload=Buffer(payload))


def test_retransmission_queue_pops_only_fully_acked():
    queue = RetransmissionQueue()
    queue.push(make_seg(b"abc"), 1)
    queue.push(make_seg(b"de"), 4)
    queue.pop(3)
    assert len(queue) == 2
    queue.pop(4)
    assert len(queue) == 1
    segment, seqno = queue.front()
    assert seqno == 4
    assert bytes(segment.payload) == b"de"
    queue.pop(6)
    assert len(queue) == 0


def test_retransmission_queue_reset_and_empty_front():
    queue = RetransmissionQueue()
    queue.push(make_seg(b"abc"), 1)
    queue.reset()
    assert len(queue) == 0
    with pytest.raises(IndexError):
        queue.front()