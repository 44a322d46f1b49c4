# spongetcp

A small TCP stack in pure Python, built from separate layers:

- `spongetcp.byte_stream.ByteStream` is a bounded, in-order byte stream with a writer side and a reader side.
- `spongetcp.stream_reassembler.StreamReassembler` takes out-of-order and overlapping substrings and writes them, in order, into a `ByteStream`.
- `spongetcp.wrapping_integers` has `WrappingInt32`, `wrap` and `unwrap`, which convert between 32-bit sequence numbers and 64-bit absolute indices.
- `spongetcp.tcp_receiver.TCPReceiver` and `spongetcp.tcp_sender.TCPSender` are the two halves of an endpoint. They handle windowing, and the sender retransmits through its `RetransmissionQueue`.
- `spongetcp.tcp_connection.TCPConnection` is a complete endpoint. You drive it by passing in received segments and clock ticks.
- `spongetcp.tcp_state` has `State` (the official TCP state names) and `TCPState`, which summarises a connection and can be compared with a `State`.
- `spongetcp.tcp_header.TCPHeader`, `spongetcp.tcp_segment.TCPSegment`, `spongetcp.ipv4_header.IPv4Header` and `spongetcp.ipv4_datagram.IPv4Datagram` are the wire formats. Parsing raises `spongetcp.parser.ParseError`, whose `result` is a `ParseResult`.
- `spongetcp.util` has `InternetChecksum`, `hexdump` and `timestamp_ms`.
- `spongetcp.buffer` has `Buffer` and `BufferList`, byte containers that drop bytes cheaply from the front.
- `spongetcp.tcp_config.TCPConfig` holds the timeouts, capacities and an optional fixed initial sequence number.

The package has no runtime dependencies.

## Installation

```
pip install .
```

## Examples

Reassembling a stream:

```python
from spongetcp.stream_reassembler import StreamReassembler

r = StreamReassembler(65000)
r.push_substring(b"b", 1, False)
r.push_substring(b"a", 0, False)
out = r.stream_out()
assert out.read(out.buffer_size()) == b"ab"
```

Serialising a segment and parsing it back:

```python
from spongetcp.tcp_segment import TCPSegment

seg = TCPSegment()
seg.header.syn = True
wire = seg.serialize(0).concatenate()
parsed = TCPSegment.parse(wire, 0)
assert parsed.header.syn
```

Driving a connection:

```python
from spongetcp.tcp_config import TCPConfig
from spongetcp.tcp_connection import TCPConnection
from spongetcp.tcp_state import State

with TCPConnection(TCPConfig()) as conn:
    conn.connect()
    assert conn.state() == State.SYN_SENT
    syn = conn.segments_out().popleft()
    print(syn.header.summary())
```

A `TCPConnection` that is still active when `close()` is called, or when its `with` block is left, sends a RST to its peer.

## What it does not do

The package does no I/O. It opens no sockets, reads no TUN devices, runs no event loop and provides no command-line program. Segments go in through `TCPConnection.segment_received` and come out of `TCPConnection.segments_out()`. Time advances only when `tick` is called. Carrying segments over a network is up to the caller.

## Running the tests

```
pip install ".[test]"
pytest
```