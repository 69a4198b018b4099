"""SHUTDOWN, SHUTDOWN ACK and SHUTDOWN COMPLETE chunks."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .chunkheader import ChunkHeader, ParseError
from .chunktype import ChunkType, chunk_type_name

__all__ = ["Shutdown", "ShutdownAck", "ShutdownComplete"]

CUMULATIVE_TSN_ACK_LENGTH = 4

_TSN = struct.Struct("!I")


def _parse(raw: bytes, expected: ChunkType, label: str) -> ChunkHeader:
    header = ChunkHeader.unmarshal(raw)
    if header.type != expected:
        raise ParseError(
            "ChunkType is not of type %s: actually is %s" % (label, chunk_type_name(int(header.type)))
        )
    return header


@dataclass
class Shutdown:
    """A SHUTDOWN chunk carrying the cumulative TSN ack."""

    cumulative_tsn_ack: int = 0
    flags: int = 0

    @classmethod
    def unmarshal(cls, raw: bytes) -> "Shutdown":
        """Decode a SHUTDOWN chunk."""
        header = _parse(raw, ChunkType.SHUTDOWN, "SHUTDOWN")
        if len(header.raw) != CUMULATIVE_TSN_ACK_LENGTH:
            raise ParseError("invalid chunk size")
        (tsn,) = _TSN.unpack(header.raw)
        return cls(cumulative_tsn_ack=tsn, flags=header.flags)

    def marshal(self) -> bytes:
        """Encode the chunk, header included."""
        value = _TSN.pack(self.cumulative_tsn_ack & 0xFFFFFFFF)
        return ChunkHeader(type=ChunkType.SHUTDOWN, flags=self.flags, raw=value).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return False

    def __str__(self) -> str:
        return str(ChunkType.SHUTDOWN)


@dataclass
class ShutdownAck:
    """A SHUTDOWN ACK chunk."""

    flags: int = 0
    raw: bytes = b""

    @classmethod
    def unmarshal(cls, raw: bytes) -> "ShutdownAck":
        """Decode a SHUTDOWN ACK chunk."""
        header = _parse(raw, ChunkType.SHUTDOWN_ACK, "SHUTDOWN-ACK")
        return cls(flags=header.flags, raw=header.raw)

    def marshal(self) -> bytes:
        """Encode the chunk, header included."""
        return ChunkHeader(type=ChunkType.SHUTDOWN_ACK, flags=self.flags, raw=self.raw).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return False

    def __str__(self) -> str:
        return str(ChunkType.SHUTDOWN_ACK)


@dataclass
class ShutdownComplete:
    """A SHUTDOWN COMPLETE chunk."""

    flags: int = 0
    raw: bytes = b""

    @classmethod
    def unmarshal(cls, raw: bytes) -> "ShutdownComplete":
        """Decode a SHUTDOWN COMPLETE chunk."""
        header = _parse(raw, ChunkType.SHUTDOWN_COMPLETE, "SHUTDOWN-COMPLETE")
        return cls(flags=header.flags, raw=header.raw)

    def marshal(self) -> bytes:
        """Encode the chunk, header included."""
        return ChunkHeader(
            type=ChunkType.SHUTDOWN_COMPLETE, flags=self.flags, raw=self.raw
        ).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return False

    def __str__(self) -> str:
        return str(ChunkType.SHUTDOWN_COMPLETE)