"""Chunk type identifiers carried in the first byte of every chunk."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["ChunkType", "chunk_type_name"]


class ChunkType(IntEnum):
    """Known values of the Chunk Type field."""

    PAYLOAD_DATA = 0
    INIT = 1
    INIT_ACK = 2
    SACK = 3
    HEARTBEAT = 4
    HEARTBEAT_ACK = 5
    ABORT = 6
    SHUTDOWN = 7
    SHUTDOWN_ACK = 8
    ERROR = 9
    COOKIE_ECHO = 10
    COOKIE_ACK = 11
    CWR = 13
    SHUTDOWN_COMPLETE = 14
    RECONFIG = 130
    FORWARD_TSN = 192

    def __str__(self) -> str:
        return _LABELS[self]


_LABELS = {
    ChunkType.PAYLOAD_DATA: "DATA",
    ChunkType.INIT: "INIT",
    ChunkType.INIT_ACK: "INIT-ACK",
    ChunkType.SACK: "SACK",
    ChunkType.HEARTBEAT: "HEARTBEAT",
    ChunkType.HEARTBEAT_ACK: "HEARTBEAT-ACK",
    ChunkType.ABORT: "ABORT",
    ChunkType.SHUTDOWN: "SHUTDOWN",
    ChunkType.SHUTDOWN_ACK: "SHUTDOWN-ACK",
    ChunkType.ERROR: "ERROR",
    ChunkType.COOKIE_ECHO: "COOKIE-ECHO",
    ChunkType.COOKIE_ACK: "COOKIE-ACK",
    ChunkType.CWR: "ECNE",  # Explicit Congestion Notification Echo
    ChunkType.SHUTDOWN_COMPLETE: "SHUTDOWN-COMPLETE",
    ChunkType.RECONFIG: "RECONFIG",
    ChunkType.FORWARD_TSN: "FORWARD-TSN",
}


def chunk_type_name(value: int) -> str:
    """Return the display name of a chunk type value, known or not."""
    try:
        return _LABELS[ChunkType(int(value))]
    except ValueError:
        return "Unknown ChunkType: %d" % int(value)