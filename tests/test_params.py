import pytest

from sctpwire.chunkheader import ParseError
from sctpwire.chunktype import ChunkType
from sctpwire.params import (
    ChunkList,
    ForwardTSNSupported,
    HeartbeatInfo,
    OutgoingResetRequest,
    Param,
    ParamType,
    Random,
    build_param,
    parse_param_type,
)


def param_a():
    return bytes([0x0, 0xD, 0x0, 0x16, 0x0, 0x0, 0x0, 0x1, 0x0, 0x0, 0x0, 0x2,
                  0x0, 0x0, 0x0, 0x3, 0x0, 0x4, 0x0, 0x5, 0x0, 0x6])


def param_b():
    return bytes([0x0, 0xD, 0x0, 0x10, 0x0, 0x0, 0x0, 0x1, 0x0, 0x0, 0x0, 0x2,
                  0x0, 0x0, 0x0, 0x3])


def test_build_param_success():
    raw = param_a()
    p = build_param(parse_param_type(raw), raw)
    assert isinstance(p, OutgoingResetRequest)
    assert p.marshal() == raw


@pytest.mark.parametrize("raw", [bytes([0x0, 0x0]), param_a()[:8]])
def test_build_param_failure(raw):
    ptype = parse_param_type(raw)
    with pytest.raises(ParseError):
        build_param(ptype, raw)


def test_parse_param_type_too_short():
    with pytest.raises(ParseError):
        parse_param_type(b"\x00")


def test_parse_param_type_known_value():
    assert parse_param_type(b"\xc0\x00") == ParamType.FORWARD_TSN_SUPPORTED


def test_forward_tsn_supported_success():
    raw = bytes([0xC0, 0x0, 0x0, 0x4])
    actual = ForwardTSNSupported.unmarshal(raw)
    assert actual == ForwardTSNSupported(type=ParamType.FORWARD_TSN_SUPPORTED, raw=b"")
    assert actual.length() == 4
    assert actual.marshal() == raw


def test_forward_tsn_supported_failure():
    with pytest.raises(ParseError):
        ForwardTSNSupported.unmarshal(bytes([0x0, 0xD, 0x0]))


@pytest.mark.parametrize(
    "raw, streams, length",
    [(param_a(), [4, 5, 6], 22), (param_b(), [], 16)],
)
def test_outgoing_reset_request_success(raw, streams, length):
    actual = OutgoingResetRequest.unmarshal(raw)
    expected = OutgoingResetRequest(
        type=ParamType.OUTGOING_SSN_RESET_REQUEST,
        raw=raw[4:],
        reconfig_request_sequence_number=1,
        reconfig_response_sequence_number=2,
        sender_last_tsn=3,
        stream_identifiers=streams,
    )
    assert actual == expected
    assert actual.length() == length
    assert actual.marshal() == raw


@pytest.mark.parametrize("raw", [param_a()[:8], bytes([0x0, 0xD, 0x0, 0x4])])
def test_outgoing_reset_request_failure(raw):
    with pytest.raises(ParseError):
        OutgoingResetRequest.unmarshal(raw)


def test_heartbeat_info_round_trip():
    p = HeartbeatInfo(heartbeat_information=b"abcdef")
    raw = p.marshal()
    assert raw == b"\x00\x01\x00\x0aabcdef"
    parsed = build_param(parse_param_type(raw), raw)
    assert isinstance(parsed, HeartbeatInfo)
    assert parsed.heartbeat_information == b"abcdef"


def test_random_round_trip():
    raw = Random(random_data=bytes(range(8))).marshal()
    assert raw[:4] == b"\x80\x02\x00\x0c"
    parsed = Random.unmarshal(raw)
    assert parsed.random_data == bytes(range(8))
    assert parsed.length() == 12


def test_chunk_list_round_trip():
    raw = ChunkList(chunk_types=[ChunkType.INIT, ChunkType.RECONFIG]).marshal()
    assert raw == b"\x80\x03\x00\x06\x01\x82"
    parsed = ChunkList.unmarshal(raw)
    assert parsed.chunk_types == [ChunkType.INIT, ChunkType.RECONFIG]


def test_generic_param_for_state_cookie():
    raw = b"\x00\x07\x00\x08cook"
    parsed = build_param(parse_param_type(raw), raw)
    assert type(parsed) is Param
    assert parsed.type == ParamType.STATE_COOKIE
    assert parsed.marshal() == raw


def test_param_header_length_beyond_data():
    with pytest.raises(ParseError):
        Param.unmarshal(b"\x00\x07\x00\x10ab")