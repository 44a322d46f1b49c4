"""Reassembles possibly out-of-order, overlapping substrings into a ByteStream."""

from __future__ import annotations

from .byte_stream import ByteStream

__all__ = ["StreamReassembler"]


def _as_bytes(data: object) -> bytes:
    if isinstance(data, str):
        return data.encode("latin-1")
    return bytes(data)  # type: ignore[call-overload]


class StreamReassembler:
    """Stores up to ``capacity`` bytes beyond the first unread byte of the output.

    The window covers the absolute indices from the number of bytes read from
    the output up to that plus ``capacity``; anything outside it is dropped.
    """

    def __init__(self, capacity: int) -> None:
        self._output = ByteStream(capacity)
        self._capacity = capacity
        self._unread = 0
        self._buffer = bytearray(capacity)
        self._held = bytearray(capacity)
        self._eof = False
        self._end_pos = 0

    def _slide_window(self) -> None:
        bytes_read = self._output.bytes_read()
        update = bytes_read - self._unread
        if update:
            del self._buffer[:update]
            self._buffer.extend(bytes(update))
            del self._held[:update]
            self._held.extend(bytes(update))
        self._unread = bytes_read

    def push_substring(self, data: object, index: int, eof: bool) -> None:
        """Accept a substring starting at ``index`` and write newly contiguous bytes.

        Bytes that do not fit in the window are dropped; if the tail of the
        substring is dropped, ``eof`` is disregarded.
        """
        raw = _as_bytes(data)
        self._slide_window()
        window_end = self._unread + self._capacity

        start = max(index, self._unread)
        stop = min(index + len(raw), window_end)
        if start < stop:
            lo, hi = start - self._unread, stop - self._unread
            self._buffer[lo:hi] = raw[start - index : stop - index]
            self._held[lo:hi] = b"\x01" * (stop - start)

        first = self._output.bytes_written() - self._unread
        last = self._held.find(0, first)
        if last == -1:
            last = self._capacity
        if last > first:
            assembled = bytes(self._buffer[first:last])
            self._held[first:last] = bytes(last - first)
            self._output.write(assembled)

        if eof and window_end >= index + len(raw):
            self._eof = True
            self._end_pos = index + len(raw)
        if self._eof and self._output.bytes_written() == self._end_pos:
            self._output.end_input()

    def stream_out(self) -> ByteStream:
        """The reassembled in-order byte stream."""
        return self._output

    def unassembled_bytes(self) -> int:
        """Number of stored bytes not yet written to the output."""
        return self._held.count(1)

    def empty(self) -> bool:
        return self.unassembled_bytes() == 0