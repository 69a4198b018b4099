import pytest

from sctpwire.chunkheader import ParseError
from sctpwire.errorcause import (
    ErrorCause,
    ErrorCauseCode,
    InvalidMandatoryParameter,
    ProtocolViolation,
    UnrecognizedChunkType,
    build_error_cause,
)


def test_code_labels():
    assert str(ErrorCause(code=ErrorCauseCode.PROTOCOL_VIOLATION)) == "Protocol Violation"
    assert str(ErrorCause(code=ErrorCauseCode.UNRESOLVABLE_ADDRESS)) == "Unresolvable IP"
    assert (
        str(ErrorCause(code=ErrorCauseCode.UNRECOGNIZED_CHUNK_TYPE))
        == "Unrecognized Chunk Type"
    )


def test_unknown_code_label():
    assert str(ErrorCause(code=99)) == "Unknown CauseCode: 99"


def test_protocol_violation_round_trip():
    cause = ProtocolViolation(additional_information=b"oops")
    wire = cause.marshal()
    assert int.from_bytes(wire[:2], "big") == ErrorCauseCode.PROTOCOL_VIOLATION
    assert int.from_bytes(wire[2:4], "big") == len(wire)
    assert len(wire) == cause.length()

    parsed = build_error_cause(wire)
    assert isinstance(parsed, ProtocolViolation)
    assert parsed.additional_information == b"oops"
    assert parsed.marshal() == wire
    assert str(parsed) == "Protocol Violation: oops"


def test_unrecognized_chunk_type_round_trip():
    chunk = bytes([0xFF, 0x00, 0x00, 0x04])
    cause = UnrecognizedChunkType(code=1, unrecognized_chunk=chunk)
    wire = cause.marshal()
    assert cause.code == ErrorCauseCode.UNRECOGNIZED_CHUNK_TYPE
    assert wire[4:] == chunk

    parsed = build_error_cause(wire)
    assert isinstance(parsed, UnrecognizedChunkType)
    assert parsed.unrecognized_chunk == chunk
    assert parsed.marshal() == wire
    assert str(parsed) == "Unrecognized Chunk Type"


def test_invalid_mandatory_parameter_round_trip():
    cause = InvalidMandatoryParameter()
    wire = cause.marshal()
    parsed = build_error_cause(wire)
    assert isinstance(parsed, InvalidMandatoryParameter)
    assert parsed.code == ErrorCauseCode.INVALID_MANDATORY_PARAMETER
    assert parsed.raw == b""
    assert parsed.length() == len(wire)
    assert str(parsed) == "Invalid Mandatory Parameter"


def test_unmarshal_ignores_trailing_bytes():
    wire = ErrorCause(code=ErrorCauseCode.NO_USER_DATA, raw=b"abcd").marshal()
    parsed = ErrorCause.unmarshal(wire + b"\xaa\xbb")
    assert parsed.code is ErrorCauseCode.NO_USER_DATA
    assert parsed.raw == b"abcd"


def test_build_unhandled_code():
    wire = ErrorCause(code=ErrorCauseCode.INVALID_STREAM_IDENTIFIER).marshal()
    with pytest.raises(ParseError, match="Invalid Stream Identifier"):
        build_error_cause(wire)


def test_build_too_short():
    with pytest.raises(ParseError):
        build_error_cause(b"\x00")


def test_protocol_violation_truncated():
    wire = ProtocolViolation(additional_information=b"oops").marshal()
    with pytest.raises(ParseError, match="Protocol Violation"):
        ProtocolViolation.unmarshal(wire[:-1])


def test_header_only_too_short():
    with pytest.raises(ParseError):
        ErrorCause.unmarshal(b"\x00\x07\x00")