"""The RE-CONFIG chunk, carrying one or two stream reconfiguration parameters."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .chunkheader import ChunkHeader, ParseError, get_padding, pad_bytes
from .chunktype import ChunkType
from .params import Param, build_param, parse_param_type

__all__ = ["Reconfig"]


def _parse_param(raw: bytes) -> Param:
    try:
        param_type = parse_param_type(raw)
    except ParseError as exc:
        raise ParseError("failed to parse param type: %s" % exc) from exc
    return build_param(param_type, raw)


@dataclass
class Reconfig:
    """A RE-CONFIG chunk with a mandatory and an optional parameter."""

    param_a: Optional[Param] = None
    param_b: Optional[Param] = None
    flags: int = 0

    @classmethod
    def unmarshal(cls, raw: bytes) -> "Reconfig":
        """Decode a RE-CONFIG chunk."""
        header = ChunkHeader.unmarshal(raw)
        value = header.raw
        param_a = _parse_param(value)

        offset = param_a.length() + get_padding(param_a.length())
        param_b = _parse_param(value[offset:]) if len(value) > offset else None
        return cls(param_a=param_a, param_b=param_b, flags=header.flags)

    def marshal(self) -> bytes:
        """Encode the chunk; parameter A is padded when B follows it."""
        if self.param_a is None:
            raise ParseError("unable to marshal parameter A for reconfig: no parameter")
        try:
            out = self.param_a.marshal()
        except ParseError as exc:
            raise ParseError("unable to marshal parameter A for reconfig: %s" % exc) from exc
        if self.param_b is not None:
            out = pad_bytes(out, get_padding(len(out)))
            try:
                out += self.param_b.marshal()
            except ParseError as exc:
                raise ParseError("unable to marshal parameter B for reconfig: %s" % exc) from exc
        return ChunkHeader(type=ChunkType.RECONFIG, flags=self.flags, raw=out).marshal()

    def check(self) -> bool:
        """Return whether the association should be aborted."""
        return True

    def __str__(self) -> str:
        text = "Param A:\n %s" % (self.param_a,)
        if self.param_b is not None:
            text += "Param B:\n %s" % (self.param_b,)
        return text