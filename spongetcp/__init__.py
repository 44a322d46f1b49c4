"""A user-space TCP stack: byte streams, reassembly, wire formats, sender, receiver and connection."""

__version__ = "0.1.0"