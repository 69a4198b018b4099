"""Error causes carried in ERROR and ABORT chunks."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum

from .chunkheader import ParseError

__all__ = [
    "ERROR_CAUSE_HEADER_LENGTH",
    "ErrorCauseCode",
    "ErrorCause",
    "InvalidMandatoryParameter",
    "UnrecognizedChunkType",
    "ProtocolViolation",
    "build_error_cause",
]

ERROR_CAUSE_HEADER_LENGTH = 4

_HEADER = struct.Struct("!HH")


class ErrorCauseCode(IntEnum):
    """Cause codes that appear in ERROR or ABORT chunks."""

    INVALID_STREAM_IDENTIFIER = 1
    MISSING_MANDATORY_PARAMETER = 2
    STALE_COOKIE_ERROR = 3
    OUT_OF_RESOURCE = 4
    UNRESOLVABLE_ADDRESS = 5
    UNRECOGNIZED_CHUNK_TYPE = 6
    INVALID_MANDATORY_PARAMETER = 7
    UNRECOGNIZED_PARAMETERS = 8
    NO_USER_DATA = 9
    COOKIE_RECEIVED_WHILE_SHUTTING_DOWN = 10
    RESTART_OF_AN_ASSOCIATION_WITH_NEW_ADDRESSES = 11
    USER_INITIATED_ABORT = 12
    PROTOCOL_VIOLATION = 13

    def __str__(self) -> str:
        return _LABELS[self]


_LABELS = {
    ErrorCauseCode.INVALID_STREAM_IDENTIFIER: "Invalid Stream Identifier",
    ErrorCauseCode.MISSING_MANDATORY_PARAMETER: "Missing Mandatory Parameter",
    ErrorCauseCode.STALE_COOKIE_ERROR: "Stale Cookie Error",
    ErrorCauseCode.OUT_OF_RESOURCE: "Out Of Resource",
    ErrorCauseCode.UNRESOLVABLE_ADDRESS: "Unresolvable IP",
    ErrorCauseCode.UNRECOGNIZED_CHUNK_TYPE: "Unrecognized Chunk Type",
    ErrorCauseCode.INVALID_MANDATORY_PARAMETER: "Invalid Mandatory Parameter",
    ErrorCauseCode.UNRECOGNIZED_PARAMETERS: "Unrecognized Parameters",
    ErrorCauseCode.NO_USER_DATA: "No User Data",
    ErrorCauseCode.COOKIE_RECEIVED_WHILE_SHUTTING_DOWN: "Cookie Received While Shutting Down",
    ErrorCauseCode.RESTART_OF_AN_ASSOCIATION_WITH_NEW_ADDRESSES: (
        "Restart Of An Association With New Addresses"
    ),
    ErrorCauseCode.USER_INITIATED_ABORT: "User Initiated Abort",
    ErrorCauseCode.PROTOCOL_VIOLATION: "Protocol Violation",
}


def _code_name(value: int) -> str:
    try:
        return _LABELS[ErrorCauseCode(int(value))]
    except ValueError:
        return "Unknown CauseCode: %d" % int(value)


def _as_code(value: int) -> int:
    try:
        return ErrorCauseCode(value)
    except ValueError:
        return value


def _split(raw: bytes) -> tuple[int, bytes]:
    """Return the cause code and the value bytes of an encoded cause."""
    if len(raw) < ERROR_CAUSE_HEADER_LENGTH:
        raise ParseError(
            "error cause too short: %d bytes, %d is the minimum"
            % (len(raw), ERROR_CAUSE_HEADER_LENGTH)
        )
    code, length = _HEADER.unpack_from(raw)
    if length < ERROR_CAUSE_HEADER_LENGTH or length > len(raw):
        raise ParseError(
            "error cause length %d does not fit the %d bytes available" % (length, len(raw))
        )
    return _as_code(code), bytes(raw[ERROR_CAUSE_HEADER_LENGTH:length])


@dataclass
class ErrorCause:
    """An error cause: a code and opaque value bytes."""

    code: int = 0
    raw: bytes = b""

    @classmethod
    def unmarshal(cls, raw: bytes) -> "ErrorCause":
        """Decode an error cause from the start of ``raw``."""
        code, value = _split(bytes(raw))
        return cls._from_wire(code, value)

    @classmethod
    def _from_wire(cls, code: int, value: bytes) -> "ErrorCause":
        return cls(code=code, raw=value)

    def _value(self) -> bytes:
        return bytes(self.raw)

    def marshal(self) -> bytes:
        """Encode the cause header followed by its value."""
        value = self._value()
        length = (len(value) + ERROR_CAUSE_HEADER_LENGTH) & 0xFFFF
        return _HEADER.pack(int(self.code) & 0xFFFF, length) + value

    def length(self) -> int:
        """Encoded length of the cause, header included."""
        return len(self._value()) + ERROR_CAUSE_HEADER_LENGTH

    def __str__(self) -> str:
        return _code_name(self.code)


@dataclass
class InvalidMandatoryParameter(ErrorCause):
    """Invalid Mandatory Parameter error cause."""

    code: int = ErrorCauseCode.INVALID_MANDATORY_PARAMETER


@dataclass
class UnrecognizedChunkType(ErrorCause):
    """Unrecognized Chunk Type error cause, carrying the offending chunk."""

    code: int = ErrorCauseCode.UNRECOGNIZED_CHUNK_TYPE
    unrecognized_chunk: bytes = field(default=b"")

    @classmethod
    def _from_wire(cls, code: int, value: bytes) -> "UnrecognizedChunkType":
        return cls(code=code, raw=value, unrecognized_chunk=value)

    def _value(self) -> bytes:
        return bytes(self.unrecognized_chunk)

    def marshal(self) -> bytes:
        """Encode with the Unrecognized Chunk Type code and the stored chunk."""
        self.code = ErrorCauseCode.UNRECOGNIZED_CHUNK_TYPE
        self.raw = bytes(self.unrecognized_chunk)
        return super().marshal()


@dataclass
class ProtocolViolation(ErrorCause):
    """Protocol Violation error cause with optional additional information."""

    code: int = ErrorCauseCode.PROTOCOL_VIOLATION
    additional_information: bytes = field(default=b"")

    @classmethod
    def unmarshal(cls, raw: bytes) -> "ProtocolViolation":
        try:
            code, value = _split(bytes(raw))
        except ParseError as exc:
            raise ParseError("unable to unmarshal Protocol Violation error: %s" % exc) from exc
        return cls(code=code, raw=value, additional_information=value)

    def _value(self) -> bytes:
        return bytes(self.additional_information)

    def marshal(self) -> bytes:
        """Encode the cause with the additional information as its value."""
        self.raw = bytes(self.additional_information)
        return super().marshal()

    def __str__(self) -> str:
        info = bytes(self.additional_information).decode("utf-8", errors="replace")
        return "%s: %s" % (_code_name(self.code), info)


_BUILDERS: dict[int, type[ErrorCause]] = {
    ErrorCauseCode.INVALID_MANDATORY_PARAMETER: InvalidMandatoryParameter,
    ErrorCauseCode.UNRECOGNIZED_CHUNK_TYPE: UnrecognizedChunkType,
    ErrorCauseCode.PROTOCOL_VIOLATION: ProtocolViolation,
}


def build_error_cause(raw: bytes) -> ErrorCause:
    """Decode an error cause into the class matching its cause code."""
    raw = bytes(raw)
    if len(raw) < 2:
        raise ParseError("error cause too short to hold a cause code")
    (code,) = struct.unpack_from("!H", raw)
    cause_cls = _BUILDERS.get(code)
    if cause_cls is None:
        raise ParseError("BuildErrorCause does not handle: %s" % _code_name(code))
    return cause_cls.unmarshal(raw)