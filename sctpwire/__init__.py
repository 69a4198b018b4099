"""Encoding and decoding of SCTP packets, chunks, parameters and error causes."""

__version__ = "0.1.0"

__all__ = [
    "chunktype",
    "chunkheader",
    "errorcause",
    "params",
    "forward_tsn",
    "shutdown",
    "init",
    "payload_data",
    "sack",
    "reconfig",
    "heartbeat",
    "packet",
]