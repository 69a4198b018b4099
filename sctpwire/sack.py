"""The SACK chunk, acknowledging received DATA chunks and reporting gaps."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .chunkheader import ChunkHeader, ParseError
from .chunktype import ChunkType, chunk_type_name

__all__ = ["SELECTIVE_ACK_HEADER_SIZE", "GapAckBlock", "SelectiveAck"]

SELECTIVE_ACK_HEADER_SIZE = 12

_FIXED = struct.Struct("!IIHH")
_GAP = struct.Struct("!HH")
_TSN = struct.Struct("!I")


@dataclass
class GapAckBlock:
    """A range of received TSNs, as offsets from the cumulative TSN ack."""

    start: int = 0
    end: int = 0

    def __str__(self) -> str:
        return "%d - %d" % (self.start, self.end)


@dataclass
class SelectiveAck:
    """A SACK chunk."""

    cumulative_tsn_ack: int = 0
    advertised_receiver_window_credit: int = 0
    gap_ack_blocks: list[GapAckBlock] = field(default_factory=list)
    duplicate_tsn: list[int] = field(default_factory=list)
    flags: int = 0

    @classmethod
    def unmarshal(cls, raw: bytes) -> "SelectiveAck":
        """Decode a SACK chunk."""
        header = ChunkHeader.unmarshal(raw)
        if header.type != ChunkType.SACK:
            raise ParseError(
                "ChunkType is not of type SACK: actually is %s" % chunk_type_name(int(header.type))
            )
        value = header.raw
        if len(value) < SELECTIVE_ACK_HEADER_SIZE:
            raise ParseError(
                "SACK Chunk size is not large enough to contain header: "
                "%d remaining, needs %d bytes" % (len(value), SELECTIVE_ACK_HEADER_SIZE)
            )
        cum_tsn, a_rwnd, n_gaps, n_dups = _FIXED.unpack_from(value)
        if len(value) != SELECTIVE_ACK_HEADER_SIZE + 4 * n_gaps + 4 * n_dups:
            raise ParseError("SACK Chunk size does not match predicted amount from header values")

        gaps_end = SELECTIVE_ACK_HEADER_SIZE + 4 * n_gaps
        gaps = [
            GapAckBlock(start, end)
            for start, end in _GAP.iter_unpack(value[SELECTIVE_ACK_HEADER_SIZE:gaps_end])
        ]
        dups = [tsn for (tsn,) in _TSN.iter_unpack(value[gaps_end:])]
        return cls(
            cumulative_tsn_ack=cum_tsn,
            advertised_receiver_window_credit=a_rwnd,
            gap_ack_blocks=gaps,
            duplicate_tsn=dups,
            flags=header.flags,
        )

    def marshal(self) -> bytes:
        """Encode the chunk, header included."""
        value = _FIXED.pack(
            self.cumulative_tsn_ack & 0xFFFFFFFF,
            self.advertised_receiver_window_credit & 0xFFFFFFFF,
            len(self.gap_ack_blocks) & 0xFFFF,
            len(self.duplicate_tsn) & 0xFFFF,
        )
        value += b"".join(_GAP.pack(g.start & 0xFFFF, g.end & 0xFFFF) for g in self.gap_ack_blocks)
        value += b"".join(_TSN.pack(t & 0xFFFFFFFF) for t in self.duplicate_tsn)
        return ChunkHeader(type=ChunkType.SACK, flags=self.flags, raw=value).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return False

    def __str__(self) -> str:
        text = "SACK cumTsnAck=%d arwnd=%d dupTsn=[%s]" % (
            self.cumulative_tsn_ack,
            self.advertised_receiver_window_credit,
            " ".join(str(t) for t in self.duplicate_tsn),
        )
        return text + "".join("\n gap ack: %s" % gap for gap in self.gap_ack_blocks)