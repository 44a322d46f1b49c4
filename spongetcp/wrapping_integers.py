"""32-bit sequence numbers relative to an initial sequence number."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = ["WrappingInt32", "wrap", "unwrap"]

_MASK32 = 0xFFFFFFFF
_MOD32 = 1 << 32
_HALF32 = 1 << 31
_MASK64 = (1 << 64) - 1


@dataclass(frozen=True)
class WrappingInt32:
    """A 32-bit integer that wraps around, as used for TCP seqnos and acknos."""

    raw_value: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw_value", self.raw_value & _MASK32)

    def __add__(self, other: int) -> "WrappingInt32":
        if isinstance(other, WrappingInt32) or not isinstance(other, int):
            return NotImplemented
        return WrappingInt32(self.raw_value + other)

    def __sub__(self, other: object):
        """Signed offset from another WrappingInt32, or a step back by an int."""
        if isinstance(other, WrappingInt32):
            diff = (self.raw_value - other.raw_value) & _MASK32
            return diff - _MOD32 if diff >= _HALF32 else diff
        if isinstance(other, int):
            return WrappingInt32(self.raw_value - other)
        return NotImplemented

    def __str__(self) -> str:
        return str(self.raw_value)


def wrap(n: int, isn: WrappingInt32) -> WrappingInt32:
    """Turn an absolute 64-bit sequence number into a relative 32-bit one."""
    return WrappingInt32((n & _MASK32) + isn.raw_value)


def unwrap(n: WrappingInt32, isn: WrappingInt32, checkpoint: int) -> int:
    """The absolute sequence number wrapping to ``n`` that lies closest to ``checkpoint``.

    Results never go below zero.
    """
    previous = wrap(checkpoint, isn).raw_value
    value = n.raw_value
    ahead = (value - previous) & _MASK32
    behind = (previous - value) & _MASK32
    if behind > checkpoint:
        result = checkpoint + ahead
    elif value > previous:
        result = checkpoint + ahead if ahead < behind else checkpoint - behind
    else:
        result = checkpoint - behind if behind < ahead else checkpoint + ahead
    return result & _MASK64