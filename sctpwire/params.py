"""Variable-length parameters carried in control chunks."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

from .chunkheader import ParseError
from .chunktype import ChunkType

__all__ = [
    "PARAM_HEADER_LENGTH",
    "ParamType",
    "Param",
    "ForwardTSNSupported",
    "HeartbeatInfo",
    "Random",
    "ChunkList",
    "OutgoingResetRequest",
    "parse_param_type",
    "build_param",
]

PARAM_HEADER_LENGTH = 4
OUTGOING_RESET_REQUEST_STREAMS_OFFSET = 12

_HEADER = struct.Struct("!HH")
_RESET_FIXED = struct.Struct("!III")


class ParamType(IntEnum):
    """Parameter type codes."""

    HEARTBEAT_INFO = 1
    IPV4_ADDRESS = 5
    IPV6_ADDRESS = 6
    STATE_COOKIE = 7
    UNRECOGNIZED_PARAM = 8
    COOKIE_PRESERVATIVE = 9
    HOST_NAME_ADDRESS = 11
    SUPPORTED_ADDRESS_TYPES = 12
    OUTGOING_SSN_RESET_REQUEST = 13
    INCOMING_SSN_RESET_REQUEST = 14
    SSN_TSN_RESET_REQUEST = 15
    RECONFIG_RESPONSE = 16
    ADD_OUTGOING_STREAMS_REQUEST = 17
    ADD_INCOMING_STREAMS_REQUEST = 18
    ECN_CAPABLE = 32768
    RANDOM = 32770
    CHUNK_LIST = 32771
    REQUESTED_HMAC_ALGORITHM = 32772
    PADDING = 32773
    SUPPORTED_EXTENSIONS = 32776
    FORWARD_TSN_SUPPORTED = 49152
    ADD_IP_ADDRESS = 49153
    DELETE_IP_ADDRESS = 49154
    ERROR_CAUSE_INDICATION = 49155
    SET_PRIMARY_ADDRESS = 49156
    SUCCESS_INDICATION = 49157
    ADAPTATION_LAYER_INDICATION = 49158

    def __str__(self) -> str:
        return self.name


def _as_param_type(value: int) -> int:
    try:
        return ParamType(value)
    except ValueError:
        return value


def _as_chunk_type(value: int) -> int:
    try:
        return ChunkType(value)
    except ValueError:
        return value


def parse_param_type(raw: bytes) -> int:
    """Read the parameter type from the first two bytes of ``raw``."""
    raw = bytes(raw)
    if len(raw) < 2:
        raise ParseError("param header too short to hold a parameter type")
    (value,) = struct.unpack_from("!H", raw)
    return _as_param_type(value)


def _split(raw: bytes) -> tuple[int, bytes]:
    """Return the type and value bytes of an encoded parameter."""
    if len(raw) < PARAM_HEADER_LENGTH:
        raise ParseError("param header too short")
    type_value, length = _HEADER.unpack_from(raw)
    if length < PARAM_HEADER_LENGTH:
        raise ParseError(
            "param self reported length (%d) shorter than header length (%d)"
            % (length, PARAM_HEADER_LENGTH)
        )
    if len(raw) < length:
        raise ParseError(
            "param length (%d) shorter than its self reported length (%d)" % (len(raw), length)
        )
    return _as_param_type(type_value), bytes(raw[PARAM_HEADER_LENGTH:length])


@dataclass
class Param:
    """A parameter: a type code and opaque value bytes."""

    type: int = 0
    raw: bytes = b""

    @classmethod
    def unmarshal(cls, raw: bytes) -> "Param":
        """Decode a parameter from the start of ``raw``."""
        type_value, value = _split(bytes(raw))
        return cls._from_wire(type_value, value)

    @classmethod
    def _from_wire(cls, type_value: int, value: bytes) -> "Param":
        return cls(type=type_value, raw=value)

    def _value(self) -> bytes:
        return bytes(self.raw)

    def marshal(self) -> bytes:
        """Encode the parameter header followed by its value, unpadded."""
        value = self._value()
        self.raw = value
        length = (len(value) + PARAM_HEADER_LENGTH) & 0xFFFF
        return _HEADER.pack(int(self.type) & 0xFFFF, length) + value

    def length(self) -> int:
        """Encoded length of the parameter, header included, padding excluded."""
        return len(self._value()) + PARAM_HEADER_LENGTH


@dataclass
class ForwardTSNSupported(Param):
    """Announces support for the FORWARD TSN chunk; carries no value."""

    type: int = ParamType.FORWARD_TSN_SUPPORTED

    def _value(self) -> bytes:
        return b""

    def marshal(self) -> bytes:
        self.type = ParamType.FORWARD_TSN_SUPPORTED
        return super().marshal()


@dataclass
class HeartbeatInfo(Param):
    """Opaque heartbeat information understood only by its sender."""

    type: int = ParamType.HEARTBEAT_INFO
    heartbeat_information: bytes = field(default=b"")

    @classmethod
    def _from_wire(cls, type_value: int, value: bytes) -> "HeartbeatInfo":
        return cls(type=type_value, raw=value, heartbeat_information=value)

    def _value(self) -> bytes:
        return bytes(self.heartbeat_information)

    def marshal(self) -> bytes:
        self.type = ParamType.HEARTBEAT_INFO
        return super().marshal()


@dataclass
class Random(Param):
    """Random data used for authentication."""

    type: int = ParamType.RANDOM
    random_data: bytes = field(default=b"")

    @classmethod
    def _from_wire(cls, type_value: int, value: bytes) -> "Random":
        return cls(type=type_value, raw=value, random_data=value)

    def _value(self) -> bytes:
        return bytes(self.random_data)

    def marshal(self) -> bytes:
        self.type = ParamType.RANDOM
        return super().marshal()


@dataclass
class ChunkList(Param):
    """List of chunk types, one byte each."""

    type: int = ParamType.CHUNK_LIST
    chunk_types: list[int] = field(default_factory=list)

    @classmethod
    def _from_wire(cls, type_value: int, value: bytes) -> "ChunkList":
        return cls(
            type=type_value,
            raw=value,
            chunk_types=[_as_chunk_type(b) for b in value],
        )

    def _value(self) -> bytes:
        return bytes(int(t) & 0xFF for t in self.chunk_types)

    def marshal(self) -> bytes:
        self.type = ParamType.CHUNK_LIST
        return super().marshal()


@dataclass
class OutgoingResetRequest(Param):
    """Request to reset some or all outgoing streams."""

    type: int = ParamType.OUTGOING_SSN_RESET_REQUEST
    reconfig_request_sequence_number: int = 0
    reconfig_response_sequence_number: int = 0
    sender_last_tsn: int = 0
    stream_identifiers: list[int] = field(default_factory=list)

    @classmethod
    def _from_wire(cls, type_value: int, value: bytes) -> "OutgoingResetRequest":
        if len(value) < OUTGOING_RESET_REQUEST_STREAMS_OFFSET:
            raise ParseError("outgoing SSN reset request parameter too short")
        request, response, last_tsn = _RESET_FIXED.unpack_from(value)
        count = (len(value) - OUTGOING_RESET_REQUEST_STREAMS_OFFSET) // 2
        streams = list(
            struct.unpack_from("!%dH" % count, value, OUTGOING_RESET_REQUEST_STREAMS_OFFSET)
        )
        return cls(
            type=type_value,
            raw=value,
            reconfig_request_sequence_number=request,
            reconfig_response_sequence_number=response,
            sender_last_tsn=last_tsn,
            stream_identifiers=streams,
        )

    def _value(self) -> bytes:
        fixed = _RESET_FIXED.pack(
            self.reconfig_request_sequence_number & 0xFFFFFFFF,
            self.reconfig_response_sequence_number & 0xFFFFFFFF,
            self.sender_last_tsn & 0xFFFFFFFF,
        )
        streams = b"".join(struct.pack("!H", s & 0xFFFF) for s in self.stream_identifiers)
        return fixed + streams

    def marshal(self) -> bytes:
        self.type = ParamType.OUTGOING_SSN_RESET_REQUEST
        return super().marshal()


_BUILDERS: dict[int, type[Param]] = {
    ParamType.FORWARD_TSN_SUPPORTED: ForwardTSNSupported,
    ParamType.SUPPORTED_EXTENSIONS: Param,
    ParamType.RANDOM: Random,
    ParamType.REQUESTED_HMAC_ALGORITHM: Param,
    ParamType.CHUNK_LIST: ChunkList,
    ParamType.STATE_COOKIE: Param,
    ParamType.HEARTBEAT_INFO: HeartbeatInfo,
    ParamType.OUTGOING_SSN_RESET_REQUEST: OutgoingResetRequest,
    ParamType.RECONFIG_RESPONSE: Param,
}


def build_param(param_type: int, raw: bytes) -> Param:
    """Decode ``raw`` into the parameter class for ``param_type``."""
    param_cls = _BUILDERS.get(int(param_type))
    if param_cls is None:
        raise ParseError("unhandled ParamType: %s" % param_type)
    return param_cls.unmarshal(raw)