"""Summaries of a TCP connection's state, compared against the official TCP states."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tcp_receiver import TCPReceiver
    from .tcp_sender import TCPSender

__all__ = [
    "State",
    "TCPState",
    "receiver_summary",
    "sender_summary",
    "RECEIVER_ERROR",
    "RECEIVER_LISTEN",
    "RECEIVER_SYN_RECV",
    "RECEIVER_FIN_RECV",
    "SENDER_ERROR",
    "SENDER_CLOSED",
    "SENDER_SYN_SENT",
    "SENDER_SYN_ACKED",
    "SENDER_FIN_SENT",
    "SENDER_FIN_ACKED",
]

RECEIVER_ERROR = "error (connection was reset)"
RECEIVER_LISTEN = "waiting for stream to begin (listening for SYN)"
RECEIVER_SYN_RECV = "stream started"
RECEIVER_FIN_RECV = "stream finished"

SENDER_ERROR = "error (connection was reset)"
SENDER_CLOSED = "waiting for stream to begin (no SYN sent)"
SENDER_SYN_SENT = "stream started but nothing acknowledged"
SENDER_SYN_ACKED = "stream ongoing"
SENDER_FIN_SENT = "stream finished (FIN sent) but not fully acknowledged"
SENDER_FIN_ACKED = "stream finished and fully acknowledged"


class State(Enum):
    """Official state names from the TCP specification."""

    LISTEN = 0
    SYN_RCVD = 1
    SYN_SENT = 2
    ESTABLISHED = 3
    CLOSE_WAIT = 4
    LAST_ACK = 5
    FIN_WAIT_1 = 6
    FIN_WAIT_2 = 7
    CLOSING = 8
    TIME_WAIT = 9
    CLOSED = 10
    RESET = 11


# state -> (sender summary, receiver summary, active, linger)
_OFFICIAL = {
    State.LISTEN: (SENDER_CLOSED, RECEIVER_LISTEN, True, True),
    State.SYN_RCVD: (SENDER_SYN_SENT, RECEIVER_SYN_RECV, True, True),
    State.SYN_SENT: (SENDER_SYN_SENT, RECEIVER_LISTEN, True, True),
    State.ESTABLISHED: (SENDER_SYN_ACKED, RECEIVER_SYN_RECV, True, True),
    State.CLOSE_WAIT: (SENDER_SYN_ACKED, RECEIVER_FIN_RECV, True, False),
    State.LAST_ACK: (SENDER_FIN_SENT, RECEIVER_FIN_RECV, True, False),
    State.CLOSING: (SENDER_FIN_SENT, RECEIVER_FIN_RECV, True, True),
    State.FIN_WAIT_1: (SENDER_FIN_SENT, RECEIVER_SYN_RECV, True, True),
    State.FIN_WAIT_2: (SENDER_FIN_ACKED, RECEIVER_SYN_RECV, True, True),
    State.TIME_WAIT: (SENDER_FIN_ACKED, RECEIVER_FIN_RECV, True, True),
    State.RESET: (SENDER_ERROR, RECEIVER_ERROR, False, False),
    State.CLOSED: (SENDER_FIN_ACKED, RECEIVER_FIN_RECV, False, False),
}


def receiver_summary(receiver: "TCPReceiver") -> str:
    """Describe the state of a TCPReceiver."""
    stream = receiver.stream_out()
    if stream.error():
        return RECEIVER_ERROR
    if receiver.ackno() is None:
        return RECEIVER_LISTEN
    if stream.input_ended():
        return RECEIVER_FIN_RECV
    return RECEIVER_SYN_RECV


def sender_summary(sender: "TCPSender") -> str:
    """Describe the state of a TCPSender."""
    stream = sender.stream_in()
    next_seqno = sender.next_seqno_absolute()
    if stream.error():
        return SENDER_ERROR
    if next_seqno == 0:
        return SENDER_CLOSED
    if next_seqno == sender.bytes_in_flight():
        return SENDER_SYN_SENT
    if not stream.eof():
        return SENDER_SYN_ACKED
    if next_seqno < stream.bytes_written() + 2:
        return SENDER_SYN_ACKED
    if sender.bytes_in_flight():
        return SENDER_FIN_SENT
    return SENDER_FIN_ACKED


@dataclass(frozen=True, eq=False)
class TCPState:
    """Sender and receiver summaries plus the connection's active and linger bits.

    Compares equal to another TCPState with the same fields, or to the
    State whose official summary it matches.
    """

    sender: str
    receiver: str
    active: bool = True
    linger_after_streams_finish: bool = True

    @classmethod
    def from_state(cls, state: State) -> "TCPState":
        """The summary that corresponds to an official TCP state."""
        sender, receiver, active, linger = _OFFICIAL[state]
        return cls(sender, receiver, active, linger)

    @classmethod
    def from_endpoints(
        cls, sender: "TCPSender", receiver: "TCPReceiver", active: bool, linger: bool
    ) -> "TCPState":
        """Summarize a sender and receiver; linger only counts while active."""
        return cls(sender_summary(sender), receiver_summary(receiver), active, linger if active else False)

    def _key(self) -> tuple:
        return (self.sender, self.receiver, self.active, self.linger_after_streams_finish)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, State):
            other = TCPState.from_state(other)
        if not isinstance(other, TCPState):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def name(self) -> str:
        """A one-line description of the state."""
        return (
            f"sender=`{self.sender}`, receiver=`{self.receiver}`, active={int(self.active)}, "
            f"linger_after_streams_finish={int(self.linger_after_streams_finish)}"
        )

    def __str__(self) -> str:
        return self.name()