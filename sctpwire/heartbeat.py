"""HEARTBEAT and HEARTBEAT ACK chunks."""

from __future__ import annotations

from dataclasses import dataclass, field

from .chunkheader import CHUNK_HEADER_SIZE, ChunkHeader, ParseError, get_padding, pad_bytes
from .chunktype import ChunkType, chunk_type_name
from .params import HeartbeatInfo, Param, ParamType, build_param, parse_param_type

__all__ = ["Heartbeat", "HeartbeatAck"]


def _encode_params(params: list[Param], context: str) -> bytes:
    """Concatenate parameters, padding every one but the last."""
    out = b""
    last = len(params) - 1
    for index, param in enumerate(params):
        try:
            encoded = param.marshal()
        except ParseError as exc:
            raise ParseError("%s: %s" % (context, exc)) from exc
        out += encoded
        if index != last:
            out = pad_bytes(out, get_padding(len(encoded)))
    return out


@dataclass
class Heartbeat:
    """A HEARTBEAT chunk probing the reachability of the peer."""

    params: list[Param] = field(default_factory=list)
    flags: int = 0

    @classmethod
    def unmarshal(cls, raw: bytes) -> "Heartbeat":
        """Decode a HEARTBEAT chunk holding a single Heartbeat Info parameter."""
        raw = bytes(raw)
        header = ChunkHeader.unmarshal(raw)
        if header.type != ChunkType.HEARTBEAT:
            raise ParseError(
                "ChunkType is not of type HEARTBEAT: actually is %s"
                % chunk_type_name(int(header.type))
            )
        if len(raw) <= CHUNK_HEADER_SIZE:
            raise ParseError(
                "heartbeat is not long enough to contain Heartbeat Info: %d" % len(raw)
            )
        body = raw[CHUNK_HEADER_SIZE:]
        try:
            param_type = parse_param_type(body)
        except ParseError as exc:
            raise ParseError("failed to parse param type: %s" % exc) from exc
        if param_type != ParamType.HEARTBEAT_INFO:
            raise ParseError(
                "heartbeat should only have HEARTBEAT param: instead have %s" % param_type
            )
        try:
            param = build_param(param_type, body)
        except ParseError as exc:
            raise ParseError("failed unmarshalling param in Heartbeat Chunk: %s" % exc) from exc
        return cls(params=[param], flags=header.flags)

    def marshal(self) -> bytes:
        """Encode the chunk with its parameters, header included."""
        value = _encode_params(self.params, "unable to marshal parameter for Heartbeat")
        return ChunkHeader(type=ChunkType.HEARTBEAT, flags=self.flags, raw=value).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return False

    def __str__(self) -> str:
        return str(ChunkType.HEARTBEAT)


@dataclass
class HeartbeatAck:
    """A HEARTBEAT ACK chunk echoing the Heartbeat Info of a HEARTBEAT."""

    params: list[Param] = field(default_factory=list)
    flags: int = 0

    def marshal(self) -> bytes:
        """Encode the chunk; it must carry exactly one Heartbeat Info parameter."""
        if len(self.params) != 1:
            raise ParseError("heartbeat Ack must have one param")
        if not isinstance(self.params[0], HeartbeatInfo):
            raise ParseError(
                "heartbeat Ack must have one param, and it should be a HeartbeatInfo"
            )
        value = _encode_params(self.params, "unable to marshal parameter for Heartbeat Ack")
        return ChunkHeader(type=ChunkType.HEARTBEAT_ACK, flags=self.flags, raw=value).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return False

    def __str__(self) -> str:
        return str(ChunkType.HEARTBEAT_ACK)