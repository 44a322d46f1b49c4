"""A complete TCP endpoint combining a sender and a receiver."""

from __future__ import annotations

import logging
from collections import deque

from .byte_stream import ByteStream
from .tcp_config import TCPConfig
from .tcp_receiver import TCPReceiver
from .tcp_segment import TCPSegment
from .tcp_sender import TCPSender
from .tcp_state import TCPState

__all__ = ["TCPConnection"]

_log = logging.getLogger(__name__)


class TCPConnection:
    """One endpoint of a TCP connection.

    Used as a context manager, leaving the block while the connection is
    still active aborts it with a RST.
    """

    def __init__(self, cfg: TCPConfig) -> None:
        self._cfg = cfg
        self._receiver = TCPReceiver(cfg.recv_capacity)
        self._sender = TCPSender(cfg.send_capacity, cfg.rt_timeout, cfg.fixed_isn)
        self._segments_out: deque[TCPSegment] = deque()
        self._linger_after_streams_finish = True
        self._last_received = 0
        self._time_cur = 0
        self._end_receiver = False
        self._end_sender = False
        self._receiver_fin_received = False
        self._sender_fin_sent = False
        self._connection_alive = True
        self._rst_flag = False

    def __enter__(self) -> "TCPConnection":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        """Abort with a RST if the connection is still active."""
        if self.active():
            self._unclean_shutdown(send_rst=True)

    def connect(self) -> None:
        """Initiate the connection by sending a SYN."""
        self._send_to_outbound(send_syn=True)

    def write(self, data: object) -> int:
        """Write to the outbound stream and send what the window allows."""
        written = self._sender.stream_in().write(data)
        self._send_to_outbound()
        return written

    def remaining_outbound_capacity(self) -> int:
        return self._sender.stream_in().remaining_capacity()

    def end_input_stream(self) -> None:
        """Shut down the outbound stream; inbound data can still be read."""
        if self._end_receiver and not self._sender_fin_sent:
            self._linger_after_streams_finish = False
        self._sender.stream_in().end_input()
        self.write(b"")
        self._sender_fin_sent = True

    def inbound_stream(self) -> ByteStream:
        """The byte stream received from the peer."""
        return self._receiver.stream_out()

    def bytes_in_flight(self) -> int:
        return self._sender.bytes_in_flight()

    def unassembled_bytes(self) -> int:
        return self._receiver.unassembled_bytes()

    def time_since_last_segment_received(self) -> int:
        return self._time_cur - self._last_received

    def state(self) -> TCPState:
        return TCPState.from_endpoints(
            self._sender, self._receiver, self.active(), self._linger_after_streams_finish
        )

    def segments_out(self) -> deque:
        """Segments queued for the network."""
        return self._segments_out

    def active(self) -> bool:
        """True while either stream runs or the connection lingers after both end."""
        if self._rst_flag:
            return False
        if self._end_receiver and self._end_sender and not self._linger_after_streams_finish:
            return False
        return self._connection_alive

    def _in_syn_sent(self) -> bool:
        next_seqno = self._sender.next_seqno_absolute()
        return next_seqno > 0 and next_seqno == self._sender.bytes_in_flight()

    def _pack_outbound_segment(self, seg: TCPSegment, send_rst: bool) -> None:
        if send_rst:
            seg.header.rst = True
            return
        ackno = self._receiver.ackno()
        if ackno is not None:
            seg.header.ackno = ackno
            seg.header.ack = True
        seg.header.win = self._receiver.window_size() & 0xFFFF

    def _send_to_outbound(self, send_syn: bool = False, send_rst: bool = False) -> None:
        if send_syn or self._receiver.ackno() is not None:
            self._sender.fill_window()
        pending = self._sender.segments_out()
        while pending:
            seg = pending.popleft()
            self._pack_outbound_segment(seg, send_rst)
            self._segments_out.append(seg)

    def _unclean_shutdown(self, send_rst: bool) -> None:
        self._rst_flag = True
        self._receiver.stream_out().set_error()
        self._sender.stream_in().set_error()
        if send_rst:
            if not self._sender.segments_out():
                self._sender.send_empty_segment()
            self._send_to_outbound(send_rst=True)

    def segment_received(self, seg: TCPSegment) -> None:
        """Handle a segment that arrived from the network."""
        self._last_received = self._time_cur
        header = seg.header
        if self._in_syn_sent() and header.ack and len(seg.payload) > 0:
            return

        send_empty_ack = False
        accepted = self._receiver.segment_received(seg)
        if not accepted:
            send_empty_ack = True
        if self._sender.next_seqno_absolute() > 0 and header.ack:
            if not self._sender.ack_received(header.ackno, header.win):
                send_empty_ack = True
        if seg.length_in_sequence_space() > 0:
            send_empty_ack = True

        if header.rst:
            if self._in_syn_sent() and not header.ack:
                return
            self._unclean_shutdown(send_rst=False)
            return

        if accepted:
            if header.syn and self._sender.next_seqno_absolute() == 0:
                _log.debug("peer SYN received, answering")
                self.connect()
                return
            if header.fin:
                self._receiver_fin_received = True
            if self._sender_fin_sent and self._sender.bytes_in_flight() == 0:
                self._end_sender = True
            if self._receiver_fin_received and self._receiver.unassembled_bytes() == 0:
                self._end_receiver = True
            if self._end_receiver and not self._sender_fin_sent:
                self._linger_after_streams_finish = False

        if send_empty_ack and self._receiver.ackno() is not None and not self._sender.segments_out():
            self._sender.send_empty_segment()
        self._send_to_outbound()

    def tick(self, ms_since_last_tick: int) -> None:
        """Advance time; retransmit, give up, or finish lingering as needed."""
        self._sender.tick(ms_since_last_tick)
        if self._sender.consecutive_retransmissions() > TCPConfig.MAX_RETX_ATTEMPTS:
            self._unclean_shutdown(send_rst=True)
            return
        self._send_to_outbound()
        self._time_cur += ms_since_last_tick
        if (
            self._end_receiver
            and self._end_sender
            and self._time_cur - self._last_received >= 10 * self._cfg.rt_timeout
        ):
            self._connection_alive = False