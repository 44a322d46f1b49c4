"""The sending half of a TCP endpoint."""

from __future__ import annotations

import random
from collections import deque
from dataclasses import replace
from typing import Optional

from .buffer import Buffer
from .byte_stream import ByteStream
from .tcp_config import TCPConfig
from .tcp_header import TCPHeader
from .tcp_segment import TCPSegment
from .wrapping_integers import WrappingInt32, unwrap, wrap

__all__ = ["RetransmissionQueue", "TCPSender"]


def _clone(seg: TCPSegment) -> TCPSegment:
    return TCPSegment(header=replace(seg.header), payload=Buffer(seg.payload))


class RetransmissionQueue:
    """Outstanding segments in the order they were sent, with their absolute seqnos."""

    def __init__(self) -> None:
        self._entries: deque[tuple[TCPSegment, int]] = deque()

    def push(self, segment: TCPSegment, seqno: int) -> None:
        self._entries.append((_clone(segment), seqno))

    def front(self) -> tuple[TCPSegment, int]:
        """The oldest outstanding segment and its absolute seqno."""
        if not self._entries:
            raise IndexError("retransmission queue is empty")
        segment, seqno = self._entries[0]
        return _clone(segment), seqno

    def pop(self, ackno: int) -> None:
        """Drop every leading segment fully covered by ``ackno``."""
        while self._entries:
            segment, seqno = self._entries[0]
            if ackno < seqno + segment.length_in_sequence_space():
                break
            self._entries.popleft()

    def reset(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class TCPSender:
    """Splits the outbound stream into segments and retransmits unacknowledged ones."""

    def __init__(
        self,
        capacity: int = TCPConfig.DEFAULT_CAPACITY,
        retx_timeout: int = TCPConfig.TIMEOUT_DFLT,
        fixed_isn: Optional[WrappingInt32] = None,
    ) -> None:
        if fixed_isn is None:
            fixed_isn = WrappingInt32(random.SystemRandom().getrandbits(32))
        self._isn = fixed_isn
        self._segments_out: deque[TCPSegment] = deque()
        self._initial_retransmission_timeout = retx_timeout
        self._stream = ByteStream(capacity)
        self._next_seqno = 0
        self._syn_sent = False
        self._fin_sent = False
        self._checkpoint = 0
        self._window_start = 0
        self._window_end = 1
        self._time_ms = 0
        self._consecutive_retransmissions = 0
        self._retransmission_timeout = retx_timeout
        self._timer_set = False
        self._timer_start = 0
        self._retransmission_queue = RetransmissionQueue()

    def stream_in(self) -> ByteStream:
        """The outbound byte stream the application writes to."""
        return self._stream

    def _send(self, segment: TCPSegment) -> None:
        segment.header.seqno = wrap(self._next_seqno, self._isn)
        self._retransmission_queue.push(segment, self._next_seqno)
        self._next_seqno += segment.length_in_sequence_space()
        self._segments_out.append(segment)

    def fill_window(self) -> None:
        """Send as many segments as the peer's window allows."""
        sent = False
        if not self._syn_sent:
            self._syn_sent = True
            self._send(TCPSegment(header=TCPHeader(syn=True)))
            sent = True
        while not self._fin_sent and self._window_end > self._next_seqno:
            room = self._window_end - self._next_seqno
            segment = TCPSegment(payload=Buffer(self._stream.read(min(TCPConfig.MAX_PAYLOAD_SIZE, room))))
            if room > segment.length_in_sequence_space() and self._stream.eof():
                segment.header.fin = True
                self._fin_sent = True
            if segment.length_in_sequence_space() == 0:
                break
            self._send(segment)
            sent = True
        if not self._timer_set and sent:
            self._timer_set = True
            self._timer_start = self._time_ms

    def ack_received(self, ackno: WrappingInt32, window_size: int) -> bool:
        """Process an acknowledgment; False if it acknowledges data never sent."""
        self._retransmission_timeout = self._initial_retransmission_timeout
        self._consecutive_retransmissions = 0
        ack = unwrap(ackno, self._isn, self._checkpoint)
        if ack > self._next_seqno:
            return False
        if ack > self._checkpoint:
            self._checkpoint = ack
        self._window_start = self._checkpoint
        self._window_end = self._checkpoint + window_size
        self._retransmission_queue.pop(ack)
        if len(self._retransmission_queue):
            self._timer_set = True
            self._timer_start = self._time_ms
        else:
            self._timer_set = False
        return True

    def tick(self, ms_since_last_tick: int) -> None:
        """Advance time, retransmitting the oldest segment if the timer expired."""
        self._time_ms += ms_since_last_tick
        if self._timer_set and self._time_ms - self._timer_start >= self._retransmission_timeout:
            segment, _ = self._retransmission_queue.front()
            self._segments_out.append(segment)
            if self._window_end > self._window_start:
                self._consecutive_retransmissions += 1
                self._retransmission_timeout <<= 1
            self._timer_start = self._time_ms
            self._timer_set = True

    def send_empty_segment(self) -> None:
        """Queue a segment that occupies no sequence space, e.g. for a bare ACK."""
        segment = TCPSegment()
        segment.header.seqno = wrap(self._next_seqno, self._isn)
        self._segments_out.append(segment)

    def bytes_in_flight(self) -> int:
        """Sequence numbers sent but not yet acknowledged (SYN and FIN count one)."""
        return self._next_seqno - self._checkpoint

    def consecutive_retransmissions(self) -> int:
        return self._consecutive_retransmissions

    def segments_out(self) -> deque:
        """Segments queued for transmission."""
        return self._segments_out

    def next_seqno_absolute(self) -> int:
        return self._next_seqno

    def next_seqno(self) -> WrappingInt32:
        return wrap(self._next_seqno, self._isn)