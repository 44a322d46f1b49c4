"""Configuration for the TCP sender, receiver and connection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional

from .wrapping_integers import WrappingInt32

__all__ = ["TCPConfig"]


@dataclass
class TCPConfig:
    """Tunable parameters of a TCP endpoint."""

    DEFAULT_CAPACITY: ClassVar[int] = 64000
    MAX_PAYLOAD_SIZE: ClassVar[int] = 1452
    TIMEOUT_DFLT: ClassVar[int] = 1000
    MAX_RETX_ATTEMPTS: ClassVar[int] = 8

    rt_timeout: int = TIMEOUT_DFLT
    recv_capacity: int = DEFAULT_CAPACITY
    send_capacity: int = DEFAULT_CAPACITY
    fixed_isn: Optional[WrappingInt32] = None