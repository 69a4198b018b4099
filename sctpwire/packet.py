"""SCTP packets: the common header, the chunks and the CRC32c checksum."""

from __future__ import annotations

import struct
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable

from .chunkheader import CHUNK_HEADER_SIZE, ChunkHeader, ParseError, get_padding
from .chunktype import ChunkType, chunk_type_name
from .forward_tsn import ForwardTSN
from .heartbeat import Heartbeat
from .init import Init, InitAck
from .payload_data import PayloadData
from .reconfig import Reconfig
from .sack import SelectiveAck
from .shutdown import Shutdown, ShutdownAck, ShutdownComplete

__all__ = [
    "PACKET_HEADER_SIZE",
    "Packet",
    "ControlQueue",
    "generate_packet_checksum",
]

PACKET_HEADER_SIZE = 12

_HEADER = struct.Struct("!HHI")
_CHECKSUM = struct.Struct("<I")


def _make_crc32c_table() -> list[int]:
    table = []
    for byte in range(256):
        crc = byte
        for _ in range(8):
            crc = (crc >> 1) ^ 0x82F63B78 if crc & 1 else crc >> 1
        table.append(crc)
    return table


_CRC32C_TABLE = _make_crc32c_table()


def _crc32c(data: bytes) -> int:
    crc = 0xFFFFFFFF
    for byte in data:
        crc = _CRC32C_TABLE[(crc ^ byte) & 0xFF] ^ (crc >> 8)
    return crc ^ 0xFFFFFFFF


def generate_packet_checksum(raw: bytes) -> int:
    """CRC32c of the packet with its checksum field taken as zero."""
    raw = bytes(raw)
    return _crc32c(raw[0:8] + bytes(4) + raw[12:])


_DECODERS: dict[int, Any] = {
    ChunkType.INIT: Init,
    ChunkType.INIT_ACK: InitAck,
    ChunkType.HEARTBEAT: Heartbeat,
    ChunkType.PAYLOAD_DATA: PayloadData,
    ChunkType.SACK: SelectiveAck,
    ChunkType.RECONFIG: Reconfig,
    ChunkType.FORWARD_TSN: ForwardTSN,
    ChunkType.SHUTDOWN: Shutdown,
    ChunkType.SHUTDOWN_ACK: ShutdownAck,
    ChunkType.SHUTDOWN_COMPLETE: ShutdownComplete,
    # Accepted chunks whose contents are kept opaque.
    ChunkType.ABORT: ChunkHeader,
    ChunkType.COOKIE_ECHO: ChunkHeader,
    ChunkType.COOKIE_ACK: ChunkHeader,
    ChunkType.ERROR: ChunkHeader,
}


@dataclass
class Packet:
    """An SCTP packet: ports, verification tag and a list of chunks."""

    source_port: int = 0
    destination_port: int = 0
    verification_tag: int = 0
    chunks: list[Any] = field(default_factory=list)

    @classmethod
    def unmarshal(cls, raw: bytes) -> "Packet":
        """Decode a packet and verify its checksum."""
        raw = bytes(raw)
        if len(raw) < PACKET_HEADER_SIZE:
            raise ParseError(
                "raw is smaller than the minimum length for a SCTP packet: raw only %d bytes, "
                "%d is the minimum length" % (len(raw), PACKET_HEADER_SIZE)
            )
        source_port, destination_port, tag = _HEADER.unpack_from(raw)

        chunks = []
        offset = PACKET_HEADER_SIZE
        while offset != len(raw):
            if offset + CHUNK_HEADER_SIZE > len(raw):
                raise ParseError(
                    "unable to parse SCTP chunk, not enough data for complete header: "
                    "offset %d remaining %d" % (offset, len(raw))
                )
            decoder = _DECODERS.get(raw[offset])
            if decoder is None:
                raise ParseError(
                    "failed to unmarshal, contains unknown chunk type: %s"
                    % chunk_type_name(raw[offset])
                )
            chunks.append(decoder.unmarshal(raw[offset:]))
            (length,) = struct.unpack_from("!H", raw, offset + 2)
            value_length = (length - CHUNK_HEADER_SIZE) & 0xFFFF
            offset += CHUNK_HEADER_SIZE + value_length + get_padding(value_length)

        (theirs,) = _CHECKSUM.unpack_from(raw, 8)
        ours = generate_packet_checksum(raw)
        if theirs != ours:
            raise ParseError("checksum mismatch theirs: %d ours: %d" % (theirs, ours))

        return cls(
            source_port=source_port,
            destination_port=destination_port,
            verification_tag=tag,
            chunks=chunks,
        )

    def marshal(self) -> bytes:
        """Encode the packet, padding each chunk and filling in the checksum."""
        raw = bytearray(
            _HEADER.pack(
                self.source_port & 0xFFFF,
                self.destination_port & 0xFFFF,
                self.verification_tag & 0xFFFFFFFF,
            )
        )
        raw += bytes(4)
        for chunk in self.chunks:
            raw += chunk.marshal()
            raw += bytes(get_padding(len(raw)))
        _CHECKSUM.pack_into(raw, 8, generate_packet_checksum(raw))
        return bytes(raw)

    def __str__(self) -> str:
        text = "Packet:\n\tsourcePort: %d\n\tdestinationPort: %d\n\tverificationTag: %d\n\t" % (
            self.source_port,
            self.destination_port,
            self.verification_tag,
        )
        return text + "".join(
            "Chunk %d:\n %s" % (index, chunk) for index, chunk in enumerate(self.chunks)
        )


class ControlQueue:
    """A FIFO of control packets waiting to be sent."""

    def __init__(self) -> None:
        self._queue: deque[Packet] = deque()

    def push(self, packet: Packet) -> None:
        """Append one packet."""
        self._queue.append(packet)

    def push_all(self, packets: Iterable[Packet]) -> None:
        """Append several packets in order."""
        self._queue.extend(packets)

    def pop_all(self) -> list[Packet]:
        """Remove and return every queued packet, oldest first."""
        packets = list(self._queue)
        self._queue.clear()
        return packets

    def __len__(self) -> int:
        return len(self._queue)