"""The DATA chunk, which carries user messages and their fragments."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from .chunkheader import ChunkHeader, ParseError
from .chunktype import ChunkType

__all__ = [
    "PAYLOAD_DATA_HEADER_SIZE",
    "ENDING_FRAGMENT_BITMASK",
    "BEGINNING_FRAGMENT_BITMASK",
    "UNORDERED_BITMASK",
    "IMMEDIATE_SACK_BITMASK",
    "PayloadProtocolIdentifier",
    "payload_type_name",
    "PayloadData",
]

ENDING_FRAGMENT_BITMASK = 1
BEGINNING_FRAGMENT_BITMASK = 2
UNORDERED_BITMASK = 4
IMMEDIATE_SACK_BITMASK = 8

PAYLOAD_DATA_HEADER_SIZE = 12

_FIXED = struct.Struct("!IHHI")


class PayloadProtocolIdentifier(IntEnum):
    """Payload protocol identifiers used by data channels."""

    WEBRTC_DCEP = 50
    WEBRTC_STRING = 51
    WEBRTC_BINARY = 53
    WEBRTC_STRING_EMPTY = 56
    WEBRTC_BINARY_EMPTY = 57

    def __str__(self) -> str:
        return _LABELS[self]


_LABELS = {
    PayloadProtocolIdentifier.WEBRTC_DCEP: "WebRTC DCEP",
    PayloadProtocolIdentifier.WEBRTC_STRING: "WebRTC String",
    PayloadProtocolIdentifier.WEBRTC_BINARY: "WebRTC Binary",
    PayloadProtocolIdentifier.WEBRTC_STRING_EMPTY: "WebRTC String (Empty)",
    PayloadProtocolIdentifier.WEBRTC_BINARY_EMPTY: "WebRTC Binary (Empty)",
}


def payload_type_name(value: int) -> str:
    """Return the display name of a payload protocol identifier, known or not."""
    try:
        return _LABELS[PayloadProtocolIdentifier(int(value))]
    except ValueError:
        return "Unknown Payload Protocol Identifier: %d" % int(value)


def _as_ppi(value: int) -> int:
    try:
        return PayloadProtocolIdentifier(value)
    except ValueError:
        return value


@dataclass
class PayloadData:
    """A DATA chunk together with the sender-side bookkeeping kept for it."""

    unordered: bool = False
    beginning_fragment: bool = False
    ending_fragment: bool = False
    immediate_sack: bool = False

    tsn: int = 0
    stream_identifier: int = 0
    stream_sequence_number: int = 0
    payload_type: int = 0
    user_data: bytes = b""

    # Whether the peer acknowledged this chunk.
    acked: bool = False
    miss_indicator: int = 0

    # Partial-reliability state, used only by the sender.
    since: Optional[float] = None
    n_sent: int = 0
    _abandoned: bool = False
    _all_inflight: bool = False  # meaningful only on the first fragment

    # Set when a T1-RTX timeout fired while the chunk was still in flight.
    retransmit: bool = False

    # The first fragment of the message this chunk belongs to.
    head: Optional["PayloadData"] = field(default=None, repr=False, compare=False)

    @property
    def flags(self) -> int:
        """The chunk flags implied by the fragment and ordering bits."""
        flags = 0
        if self.ending_fragment:
            flags |= ENDING_FRAGMENT_BITMASK
        if self.beginning_fragment:
            flags |= BEGINNING_FRAGMENT_BITMASK
        if self.unordered:
            flags |= UNORDERED_BITMASK
        if self.immediate_sack:
            flags |= IMMEDIATE_SACK_BITMASK
        return flags

    @classmethod
    def unmarshal(cls, raw: bytes) -> "PayloadData":
        """Decode a DATA chunk."""
        header = ChunkHeader.unmarshal(raw)
        value = header.raw
        if len(value) < PAYLOAD_DATA_HEADER_SIZE:
            raise ParseError("packet is smaller than the header size")
        tsn, stream_id, ssn, ppi = _FIXED.unpack_from(value)
        flags = header.flags
        return cls(
            unordered=bool(flags & UNORDERED_BITMASK),
            beginning_fragment=bool(flags & BEGINNING_FRAGMENT_BITMASK),
            ending_fragment=bool(flags & ENDING_FRAGMENT_BITMASK),
            immediate_sack=bool(flags & IMMEDIATE_SACK_BITMASK),
            tsn=tsn,
            stream_identifier=stream_id,
            stream_sequence_number=ssn,
            payload_type=_as_ppi(ppi),
            user_data=bytes(value[PAYLOAD_DATA_HEADER_SIZE:]),
        )

    def marshal(self) -> bytes:
        """Encode the chunk, header included, without trailing padding."""
        value = _FIXED.pack(
            self.tsn & 0xFFFFFFFF,
            self.stream_identifier & 0xFFFF,
            self.stream_sequence_number & 0xFFFF,
            int(self.payload_type) & 0xFFFFFFFF,
        ) + bytes(self.user_data)
        return ChunkHeader(type=ChunkType.PAYLOAD_DATA, flags=self.flags, raw=value).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return False

    def abandoned(self) -> bool:
        """Whether the message was abandoned and all its fragments were sent."""
        owner = self.head if self.head is not None else self
        return owner._abandoned and owner._all_inflight

    def set_abandoned(self, abandoned: bool) -> None:
        """Mark the message this chunk belongs to as abandoned or not."""
        owner = self.head if self.head is not None else self
        owner._abandoned = abandoned

    def set_all_inflight(self) -> None:
        """Record, on the last fragment, that the whole message is in flight."""
        if self.ending_fragment:
            owner = self.head if self.head is not None else self
            owner._all_inflight = True

    def __str__(self) -> str:
        return "%s\n%d" % (ChunkType.PAYLOAD_DATA, self.tsn)