"""INIT and INIT ACK chunks and the body they share."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field

from .chunkheader import ChunkHeader, ParseError, get_padding, pad_bytes
from .chunktype import ChunkType, chunk_type_name
from .params import Param, build_param, parse_param_type

__all__ = [
    "INIT_CHUNK_MIN_LENGTH",
    "MIN_ADVERTISED_RECEIVER_WINDOW",
    "AbortError",
    "InitCommon",
    "Init",
    "InitAck",
]

INIT_CHUNK_MIN_LENGTH = 16
INIT_OPTIONAL_VAR_HEADER_LENGTH = 4
MIN_ADVERTISED_RECEIVER_WINDOW = 1500

_FIXED = struct.Struct("!IIHHI")


class AbortError(ValueError):
    """Raised by ``check`` when a received chunk requires aborting the association."""


@dataclass
class InitCommon:
    """The fixed fields and optional parameters of an INIT or INIT ACK body."""

    initiate_tag: int = 0
    advertised_receiver_window_credit: int = 0
    num_outbound_streams: int = 0
    num_inbound_streams: int = 0
    initial_tsn: int = 0
    params: list[Param] = field(default_factory=list)

    @classmethod
    def unmarshal_body(cls, raw: bytes):
        """Decode the chunk value of an INIT or INIT ACK."""
        raw = bytes(raw)
        if len(raw) < INIT_CHUNK_MIN_LENGTH:
            raise ParseError(
                "chunk Value isn't long enough for mandatory parameters exp: %d actual: %d"
                % (INIT_CHUNK_MIN_LENGTH, len(raw))
            )
        tag, a_rwnd, outbound, inbound, tsn = _FIXED.unpack_from(raw)

        params = []
        offset = INIT_CHUNK_MIN_LENGTH
        while len(raw) - offset > INIT_OPTIONAL_VAR_HEADER_LENGTH:
            try:
                param_type = parse_param_type(raw[offset:])
            except ParseError as exc:
                raise ParseError("failed to parse param type: %s" % exc) from exc
            try:
                param = build_param(param_type, raw[offset:])
            except ParseError as exc:
                raise ParseError("failed unmarshalling param in Init Chunk: %s" % exc) from exc
            params.append(param)
            length = param.length()
            offset += length + get_padding(length)

        return cls(
            initiate_tag=tag,
            advertised_receiver_window_credit=a_rwnd,
            num_outbound_streams=outbound,
            num_inbound_streams=inbound,
            initial_tsn=tsn,
            params=params,
        )

    def marshal_body(self) -> bytes:
        """Encode the chunk value; every parameter but the last is padded."""
        out = _FIXED.pack(
            self.initiate_tag & 0xFFFFFFFF,
            self.advertised_receiver_window_credit & 0xFFFFFFFF,
            self.num_outbound_streams & 0xFFFF,
            self.num_inbound_streams & 0xFFFF,
            self.initial_tsn & 0xFFFFFFFF,
        )
        last = len(self.params) - 1
        for index, param in enumerate(self.params):
            try:
                encoded = param.marshal()
            except (ParseError, struct.error) as exc:
                raise ParseError(
                    "unable to marshal parameter for INIT/INITACK: %s" % exc
                ) from exc
            out += encoded
            if index != last:
                out = pad_bytes(out, get_padding(len(encoded)))
        return out

    def __str__(self) -> str:
        text = (
            "initiateTag: %d\n"
            "\tadvertisedReceiverWindowCredit: %d\n"
            "\tnumOutboundStreams: %d\n"
            "\tnumInboundStreams: %d\n"
            "\tinitialTSN: %d"
            % (
                self.initiate_tag,
                self.advertised_receiver_window_credit,
                self.num_outbound_streams,
                self.num_inbound_streams,
                self.initial_tsn,
            )
        )
        return text + "".join(
            "Param %d:\n %s" % (index, param) for index, param in enumerate(self.params)
        )


def _unmarshal_chunk(cls, chunk_type: ChunkType, label: str, raw: bytes):
    header = ChunkHeader.unmarshal(raw)
    if header.type != chunk_type:
        raise ParseError(
            "ChunkType is not of type %s: actually is %s"
            % (label, chunk_type_name(int(header.type)))
        )
    if len(header.raw) < INIT_CHUNK_MIN_LENGTH:
        raise ParseError(
            "chunk Value isn't long enough for mandatory parameters exp: %d actual: %d"
            % (INIT_CHUNK_MIN_LENGTH, len(header.raw))
        )
    # The flags of INIT and INIT ACK are reserved and must be zero.
    if header.flags != 0:
        raise ParseError("ChunkType of type %s flags must be all 0" % label)
    try:
        return cls.unmarshal_body(header.raw)
    except ParseError as exc:
        raise ParseError("failed to unmarshal INIT body: %s" % exc) from exc


def _marshal_chunk(body: InitCommon, chunk_type: ChunkType) -> bytes:
    try:
        value = body.marshal_body()
    except ParseError as exc:
        raise ParseError("failed marshaling INIT common data: %s" % exc) from exc
    return ChunkHeader(type=chunk_type, flags=0, raw=value).marshal()


def _check_chunk(body: InitCommon) -> bool:
    if body.initiate_tag == 0:
        raise AbortError("ChunkType of type INIT ACK InitiateTag must not be 0")
    if body.num_inbound_streams == 0:
        raise AbortError("INIT ACK inbound stream request must be > 0")
    if body.num_outbound_streams == 0:
        raise AbortError("INIT ACK outbound stream request must be > 0")
    if body.advertised_receiver_window_credit < MIN_ADVERTISED_RECEIVER_WINDOW:
        raise AbortError(
            "INIT ACK Advertised Receiver Window Credit (a_rwnd) must be >= 1500"
        )
    return False


@dataclass
class Init(InitCommon):
    """An INIT chunk."""

    @classmethod
    def unmarshal(cls, raw: bytes):
        """Decode the whole chunk, header included."""
        return _unmarshal_chunk(cls, ChunkType.INIT, "INIT", raw)

    def marshal(self) -> bytes:
        """Encode the whole chunk, header included."""
        return _marshal_chunk(self, ChunkType.INIT)

    def check(self) -> bool:
        """Return False for an acceptable chunk; raise AbortError otherwise."""
        return _check_chunk(self)

    def __str__(self) -> str:
        return "%s\n%s" % (ChunkType.INIT, InitCommon.__str__(self))


@dataclass
class InitAck(InitCommon):
    """An INIT ACK chunk."""

    @classmethod
    def unmarshal(cls, raw: bytes):
        """Decode the whole chunk, header included."""
        return _unmarshal_chunk(cls, ChunkType.INIT_ACK, "INIT ACK", raw)

    def marshal(self) -> bytes:
        """Encode the whole chunk, header included."""
        return _marshal_chunk(self, ChunkType.INIT_ACK)

    def check(self) -> bool:
        """Return False for an acceptable chunk; raise AbortError otherwise."""
        return _check_chunk(self)

    def __str__(self) -> str:
        return "%s\n%s" % (ChunkType.INIT_ACK, InitCommon.__str__(self))