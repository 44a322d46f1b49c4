import pytest
from hypothesis import given
from hypothesis import strategies as st

from spongetcp.buffer import Buffer, BufferList


def test_buffer_basic_views():
    buf = Buffer(b"hello")
    assert bytes(buf) == b"hello"
    assert len(buf) == len(b"hello")
    assert buf[1] == b"hello"[1]
    assert buf.copy() == b"hello"


def test_buffer_remove_prefix():
    buf = Buffer(b"hello")
    buf.remove_prefix(2)
    assert buf.copy() == b"hello"[2:]
    assert buf[0] == b"hello"[2]
    buf.remove_prefix(len(b"llo"))
    assert buf.copy() == b""
    assert len(buf) == 0


def test_buffer_remove_prefix_too_far():
    buf = Buffer(b"abc")
    with pytest.raises(IndexError):
        buf.remove_prefix(4)
    assert buf.copy() == b"abc"


def test_buffer_index_out_of_range():
    with pytest.raises(IndexError):
        Buffer(b"ab")[2]


def test_buffer_copies_are_independent():
    original = Buffer(b"abcdef")
    twin = Buffer(original)
    twin.remove_prefix(3)
    assert original.copy() == b"abcdef"
    assert twin.copy() == b"def"


def test_buffer_slice():
    buf = Buffer(b"abcdef")
    buf.remove_prefix(1)
    assert buf[:2] == b"bc"


def test_bufferlist_concatenate_and_len():
    bl = BufferList(b"abc")
    bl.append(Buffer(b"de"))
    bl.append(BufferList(b"f"))
    assert bl.concatenate() == b"abcdef"
    assert len(bl) == len(b"abcdef")
    assert [bytes(b) for b in bl.buffers()] == [b"abc", b"de", b"f"]


def test_bufferlist_to_buffer():
    assert BufferList().to_buffer() == b""
    assert BufferList(b"xyz").to_buffer() == b"xyz"
    multi = BufferList(b"x")
    multi.append(b"y")
    with pytest.raises(ValueError):
        multi.to_buffer()


def test_bufferlist_remove_prefix_does_not_touch_source():
    source = Buffer(b"abcd")
    bl = BufferList(source)
    bl.remove_prefix(2)
    assert bl.concatenate() == b"cd"
    assert source.copy() == b"abcd"


def test_bufferlist_remove_prefix_too_far():
    bl = BufferList(b"ab")
    with pytest.raises(IndexError):
        bl.remove_prefix(3)


@given(st.lists(st.binary(), max_size=6), st.data())
def test_bufferlist_remove_prefix_matches_bytes(chunks, data):
    bl = BufferList()
    for chunk in chunks:
        bl.append(chunk)
    whole = b"".join(chunks)
    n = data.draw(st.integers(min_value=0, max_value=len(whole)))
    bl.remove_prefix(n)
    assert bl.concatenate() == whole[n:]
    assert len(bl) == len(whole) - n