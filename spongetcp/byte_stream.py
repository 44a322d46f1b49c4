"""A flow-controlled, in-order, in-memory byte stream."""

from __future__ import annotations

__all__ = ["ByteStream"]


def _as_bytes(data: object) -> bytes:
    if isinstance(data, str):
        return data.encode("latin-1")
    return bytes(data)  # type: ignore[call-overload]


class ByteStream:
    """Bytes are written on the input side and read from the output side.

    The writer may end the input; the stream holds at most ``capacity`` bytes.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        self._buffer = bytearray()
        self._total_read = 0
        self._total_written = 0
        self._error = False
        self._input_ended = False

    def write(self, data: object) -> int:
        """Write as many bytes as fit and return how many were accepted."""
        raw = _as_bytes(data)
        accepted = min(len(raw), self.remaining_capacity())
        self._buffer += raw[:accepted]
        self._total_written += accepted
        return accepted

    def remaining_capacity(self) -> int:
        return self._capacity - len(self._buffer)

    def end_input(self) -> None:
        self._input_ended = True

    def set_error(self) -> None:
        self._error = True

    def peek_output(self, length: int) -> bytes:
        """Copy up to ``length`` bytes from the output side without removing them."""
        return bytes(self._buffer[:length])

    def pop_output(self, length: int) -> None:
        """Remove ``length`` bytes from the output side."""
        if length < 0 or length > len(self._buffer):
            raise ValueError(f"cannot pop {length} bytes from a buffer of {len(self._buffer)}")
        del self._buffer[:length]
        self._total_read += length

    def read(self, length: int) -> bytes:
        """Remove and return up to ``length`` bytes."""
        chunk = bytes(self._buffer[:length])
        del self._buffer[: len(chunk)]
        self._total_read += len(chunk)
        return chunk

    def input_ended(self) -> bool:
        return self._input_ended

    def error(self) -> bool:
        return self._error

    def buffer_size(self) -> int:
        return len(self._buffer)

    def buffer_empty(self) -> bool:
        return not self._buffer

    def eof(self) -> bool:
        """True once input has ended and every written byte has been read."""
        return self._input_ended and self._total_read == self._total_written

    def bytes_written(self) -> int:
        return self._total_written

    def bytes_read(self) -> int:
        return self._total_read