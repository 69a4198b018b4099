"""The FORWARD TSN chunk, used to move the receiver's cumulative TSN forward."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .chunkheader import ChunkHeader, ParseError
from .chunktype import ChunkType

__all__ = ["ForwardTSNStream", "ForwardTSN"]

NEW_CUMULATIVE_TSN_LENGTH = 4
FORWARD_TSN_STREAM_LENGTH = 4

_STREAM = struct.Struct("!HH")
_TSN = struct.Struct("!I")


@dataclass
class ForwardTSNStream:
    """A skipped stream and the largest stream sequence number skipped in it."""

    identifier: int = 0
    sequence: int = 0

    @classmethod
    def unmarshal(cls, raw: bytes) -> "ForwardTSNStream":
        """Decode a stream entry from the start of ``raw``."""
        if len(raw) < FORWARD_TSN_STREAM_LENGTH:
            raise ParseError("chunk too short")
        identifier, sequence = _STREAM.unpack_from(bytes(raw))
        return cls(identifier=identifier, sequence=sequence)

    def marshal(self) -> bytes:
        """Encode the stream entry."""
        return _STREAM.pack(self.identifier & 0xFFFF, self.sequence & 0xFFFF)


@dataclass
class ForwardTSN:
    """A FORWARD TSN chunk."""

    new_cumulative_tsn: int = 0
    streams: list[ForwardTSNStream] = field(default_factory=list)
    flags: int = 0

    @classmethod
    def unmarshal(cls, raw: bytes) -> "ForwardTSN":
        """Decode a FORWARD TSN chunk."""
        header = ChunkHeader.unmarshal(raw)
        value = header.raw
        if len(value) < NEW_CUMULATIVE_TSN_LENGTH:
            raise ParseError("chunk too short")
        (tsn,) = _TSN.unpack_from(value)
        streams = []
        for offset in range(NEW_CUMULATIVE_TSN_LENGTH, len(value), FORWARD_TSN_STREAM_LENGTH):
            try:
                streams.append(ForwardTSNStream.unmarshal(value[offset:]))
            except ParseError as exc:
                raise ParseError("failed to marshal stream: %s" % exc) from exc
        return cls(new_cumulative_tsn=tsn, streams=streams, flags=header.flags)

    def marshal(self) -> bytes:
        """Encode the chunk, header included."""
        value = _TSN.pack(self.new_cumulative_tsn & 0xFFFFFFFF) + b"".join(
            s.marshal() for s in self.streams
        )
        return ChunkHeader(type=ChunkType.FORWARD_TSN, flags=self.flags, raw=value).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return True

    def __str__(self) -> str:
        lines = ["New Cumulative TSN: %d\n" % self.new_cumulative_tsn]
        lines.extend(" - si=%d, ssn=%d\n" % (s.identifier, s.sequence) for s in self.streams)
        return "".join(lines)