"""The common chunk header: type, flags, length and value."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from .chunktype import ChunkType, chunk_type_name

__all__ = [
    "CHUNK_HEADER_SIZE",
    "ParseError",
    "ChunkHeader",
    "get_padding",
    "pad_bytes",
]

CHUNK_HEADER_SIZE = 4

_HEADER = struct.Struct("!BBH")


class ParseError(ValueError):
    """Raised when wire data cannot be decoded or encoded."""


def get_padding(length: int) -> int:
    """Number of zero bytes needed to bring ``length`` to a multiple of 4."""
    return -length % 4


def pad_bytes(data: bytes, padding: int) -> bytes:
    """Return ``data`` followed by ``padding`` zero bytes."""
    return bytes(data) + bytes(padding)


def _as_chunk_type(value: int) -> int:
    try:
        return ChunkType(value)
    except ValueError:
        return value


@dataclass
class ChunkHeader:
    """A chunk's type, flags and value bytes (padding excluded)."""

    type: int = 0
    flags: int = 0
    raw: bytes = b""

    @classmethod
    def unmarshal(cls, raw: bytes) -> "ChunkHeader":
        """Decode a chunk header and its value from the start of ``raw``."""
        raw = bytes(raw)
        if len(raw) < CHUNK_HEADER_SIZE:
            raise ParseError(
                "raw is too small for a SCTP chunk: raw only %d bytes, "
                "%d is the minimum length" % (len(raw), CHUNK_HEADER_SIZE)
            )
        type_value, flags, length = _HEADER.unpack_from(raw)

        # The length counts the header; a length below it wraps around.
        value_length = (length - CHUNK_HEADER_SIZE) & 0xFFFF
        end = CHUNK_HEADER_SIZE + value_length
        length_after_value = len(raw) - end

        if length_after_value < 0:
            raise ParseError(
                "not enough data left in SCTP packet to satisfy requested "
                "length: remain %d req %d" % (value_length, len(raw) - CHUNK_HEADER_SIZE)
            )
        if length_after_value < 4:
            # Trailing padding must be all zero.
            for offset in reversed(range(end, len(raw))):
                if raw[offset] != 0:
                    raise ParseError("chunk padding is non-zero at offset: %d" % offset)

        return cls(
            type=_as_chunk_type(type_value),
            flags=flags,
            raw=raw[CHUNK_HEADER_SIZE:end],
        )

    def marshal(self) -> bytes:
        """Encode the header followed by the value, without trailing padding."""
        raw = bytes(self.raw)
        return _HEADER.pack(
            int(self.type) & 0xFF,
            self.flags & 0xFF,
            (len(raw) + CHUNK_HEADER_SIZE) & 0xFFFF,
        ) + raw

    def value_length(self) -> int:
        """Length of the chunk value in bytes."""
        return len(self.raw)

    def __str__(self) -> str:
        return chunk_type_name(int(self.type))