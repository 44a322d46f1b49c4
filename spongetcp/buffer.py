"""Read-only byte buffers that can cheaply drop bytes from the front."""

from __future__ import annotations

from collections import deque
from typing import Iterable, Union

__all__ = ["Buffer", "BufferList"]


class Buffer:
    """An immutable byte string viewed from a movable starting offset.

    Copies made with ``Buffer(other)`` share storage but have their own offset.
    """

    __slots__ = ("_storage", "_offset")
    __hash__ = None  # type: ignore[assignment]

    def __init__(self, data: Union["Buffer", bytes, bytearray, memoryview, str] = b"") -> None:
        if isinstance(data, Buffer):
            self._storage = data._storage
            self._offset = data._offset
        elif isinstance(data, str):
            self._storage = data.encode("latin-1")
            self._offset = 0
        else:
            self._storage = bytes(data)
            self._offset = 0

    def __bytes__(self) -> bytes:
        return self._storage[self._offset:]

    def __len__(self) -> int:
        return len(self._storage) - self._offset

    def __getitem__(self, index):
        if isinstance(index, slice):
            return memoryview(self._storage)[self._offset:][index].tobytes()
        size = len(self)
        if index < 0:
            index += size
        if not 0 <= index < size:
            raise IndexError("Buffer index out of range")
        return self._storage[self._offset + index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Buffer):
            return bytes(self) == bytes(other)
        if isinstance(other, (bytes, bytearray, memoryview)):
            return bytes(self) == bytes(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"Buffer({bytes(self)!r})"

    def copy(self) -> bytes:
        """The remaining contents as a new bytes object."""
        return bytes(self)

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes."""
        if n < 0:
            raise ValueError("cannot remove a negative number of bytes")
        if n > len(self):
            raise IndexError("Buffer.remove_prefix")
        self._offset += n
        if self._offset == len(self._storage):
            self._storage = b""
            self._offset = 0


def _buffers_of(data: object) -> Iterable[Buffer]:
    if isinstance(data, BufferList):
        return [Buffer(buf) for buf in data._buffers]
    if isinstance(data, Buffer):
        return [Buffer(data)]
    return [Buffer(data)]  # type: ignore[arg-type]


class BufferList:
    """A discontiguous byte string made of a sequence of Buffers."""

    __slots__ = ("_buffers",)

    def __init__(self, data: object = None) -> None:
        self._buffers: deque[Buffer] = deque()
        if data is not None:
            self.append(data)

    def buffers(self) -> tuple[Buffer, ...]:
        """The underlying buffers, front first."""
        return tuple(Buffer(buf) for buf in self._buffers)

    def append(self, other: object) -> None:
        """Append a BufferList, a Buffer or raw bytes."""
        self._buffers.extend(_buffers_of(other))

    def to_buffer(self) -> Buffer:
        """Return the contents as one Buffer; fails if they span several."""
        if not self._buffers:
            return Buffer()
        if len(self._buffers) == 1:
            return Buffer(self._buffers[0])
        raise ValueError(
            "BufferList: please use concatenate() to combine a multi-Buffer BufferList into one Buffer"
        )

    def remove_prefix(self, n: int) -> None:
        """Discard the first ``n`` bytes across buffers."""
        if n < 0:
            raise ValueError("cannot remove a negative number of bytes")
        while n > 0:
            if not self._buffers:
                raise IndexError("BufferList.remove_prefix")
            front = self._buffers[0]
            if n < len(front):
                trimmed = Buffer(front)
                trimmed.remove_prefix(n)
                self._buffers[0] = trimmed
                n = 0
            else:
                n -= len(front)
                self._buffers.popleft()

    def __len__(self) -> int:
        return sum(len(buf) for buf in self._buffers)

    def concatenate(self) -> bytes:
        """All contents joined into one bytes object."""
        return b"".join(bytes(buf) for buf in self._buffers)

    def __bytes__(self) -> bytes:
        return self.concatenate()

    def __repr__(self) -> str:
        return f"BufferList({[bytes(buf) for buf in self._buffers]!r})"