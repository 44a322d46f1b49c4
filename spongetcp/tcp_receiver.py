"""The receiving half of a TCP endpoint."""

from __future__ import annotations

from typing import Optional

from .byte_stream import ByteStream
from .stream_reassembler import StreamReassembler
from .tcp_segment import TCPSegment
from .wrapping_integers import WrappingInt32, unwrap, wrap

__all__ = ["TCPReceiver"]


class TCPReceiver:
    """Reassembles inbound segments and computes the ackno and window to advertise."""

    def __init__(self, capacity: int) -> None:
        self._reassembler = StreamReassembler(capacity)
        self._capacity = capacity
        self._isn = WrappingInt32(0)
        self._syn_received = False
        self._checkpoint = 0
        self._offset = 0

    def ackno(self) -> Optional[WrappingInt32]:
        """The first sequence number not yet received, or None before a SYN."""
        if not self._syn_received:
            return None
        return wrap(self._checkpoint, self._isn)

    def window_size(self) -> int:
        """Capacity minus the bytes reassembled but not yet read."""
        stream = self._reassembler.stream_out()
        return self._capacity + stream.bytes_read() - stream.bytes_written()

    def unassembled_bytes(self) -> int:
        return self._reassembler.unassembled_bytes()

    def segment_received(self, seg: TCPSegment) -> bool:
        """Handle an inbound segment; True if any part of it fell inside the window."""
        header = seg.header
        if not self._syn_received and not header.syn:
            return False
        if header.syn and not self._syn_received:
            self._syn_received = True
            self._isn = header.seqno

        data = bytes(seg.payload)
        seq = unwrap(header.seqno, self._isn, self._checkpoint)
        index = seq - self._offset
        length = seg.length_in_sequence_space()

        if length == 0 and seq == self._checkpoint:
            return True
        if seq >= self._checkpoint + self.window_size() or seq + length <= self._checkpoint:
            return False

        self._reassembler.push_substring(data, index, header.fin)
        self._offset = (self._offset + int(header.syn) + int(header.fin)) & 0xFFFFFFFF
        self._checkpoint = self._reassembler.stream_out().bytes_written() + self._offset
        return True

    def stream_out(self) -> ByteStream:
        """The reassembled inbound byte stream."""
        return self._reassembler.stream_out()