import pytest

from sctpwire.chunkheader import ParseError
from sctpwire.payload_data import (
    BEGINNING_FRAGMENT_BITMASK,
    ENDING_FRAGMENT_BITMASK,
    IMMEDIATE_SACK_BITMASK,
    UNORDERED_BITMASK,
    PayloadData,
    PayloadProtocolIdentifier,
    payload_type_name,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        (PayloadProtocolIdentifier.WEBRTC_DCEP, "WebRTC DCEP"),
        (PayloadProtocolIdentifier.WEBRTC_STRING, "WebRTC String"),
        (PayloadProtocolIdentifier.WEBRTC_BINARY, "WebRTC Binary"),
        (PayloadProtocolIdentifier.WEBRTC_STRING_EMPTY, "WebRTC String (Empty)"),
        (PayloadProtocolIdentifier.WEBRTC_BINARY_EMPTY, "WebRTC Binary (Empty)"),
        (7, "Unknown Payload Protocol Identifier: 7"),
    ],
)
def test_payload_type_name(value, expected):
    assert payload_type_name(value) == expected


def test_ppi_str():
    assert str(PayloadProtocolIdentifier(53)) == "WebRTC Binary"


def test_marshal_wire_bytes():
    chunk = PayloadData(
        beginning_fragment=True,
        ending_fragment=True,
        tsn=1,
        stream_identifier=2,
        stream_sequence_number=3,
        payload_type=PayloadProtocolIdentifier.WEBRTC_STRING,
        user_data=b"ABC",
    )
    assert chunk.marshal() == (
        b"\x00\x03\x00\x13"
        b"\x00\x00\x00\x01"
        b"\x00\x02\x00\x03"
        b"\x00\x00\x00\x33"
        b"ABC"
    )


@pytest.mark.parametrize(
    "kwargs, mask",
    [
        ({"ending_fragment": True}, ENDING_FRAGMENT_BITMASK),
        ({"beginning_fragment": True}, BEGINNING_FRAGMENT_BITMASK),
        ({"unordered": True}, UNORDERED_BITMASK),
        ({"immediate_sack": True}, IMMEDIATE_SACK_BITMASK),
    ],
)
def test_flag_bits(kwargs, mask):
    raw = PayloadData(**kwargs).marshal()
    assert raw[1] == mask
    parsed = PayloadData.unmarshal(raw)
    for name, value in kwargs.items():
        assert getattr(parsed, name) is value


def test_round_trip():
    original = PayloadData(
        unordered=True,
        beginning_fragment=True,
        tsn=0xFFFFFFF0,
        stream_identifier=9,
        stream_sequence_number=65535,
        payload_type=PayloadProtocolIdentifier.WEBRTC_BINARY,
        user_data=bytes(range(40)),
    )
    parsed = PayloadData.unmarshal(original.marshal())
    assert parsed == original
    assert parsed.payload_type is PayloadProtocolIdentifier.WEBRTC_BINARY
    assert parsed.marshal() == original.marshal()


def test_unknown_ppi_kept():
    parsed = PayloadData.unmarshal(PayloadData(payload_type=99).marshal())
    assert parsed.payload_type == 99


def test_unmarshal_with_padding():
    raw = PayloadData(user_data=b"A").marshal() + b"\x00\x00\x00"
    assert PayloadData.unmarshal(raw).user_data == b"A"


def test_unmarshal_too_small():
    with pytest.raises(ParseError):
        PayloadData.unmarshal(b"\x00\x03\x00\x08\x00\x00\x00\x01")


def test_unmarshal_header_too_short():
    with pytest.raises(ParseError):
        PayloadData.unmarshal(b"\x00\x03")


def test_check_does_not_abort():
    assert PayloadData().check() is False


def test_str():
    assert str(PayloadData(tsn=42)) == "DATA\n42"


def test_abandoned_requires_all_inflight():
    chunk = PayloadData(beginning_fragment=True, ending_fragment=True)
    chunk.set_abandoned(True)
    assert chunk.abandoned() is False
    chunk.set_all_inflight()
    assert chunk.abandoned() is True
    chunk.set_abandoned(False)
    assert chunk.abandoned() is False


def test_fragments_share_head_state():
    head = PayloadData(beginning_fragment=True)
    middle = PayloadData(head=head)
    last = PayloadData(ending_fragment=True, head=head)

    middle.set_abandoned(True)
    assert head._abandoned is True
    assert middle._abandoned is False
    assert last.abandoned() is False

    middle.set_all_inflight()
    assert head._all_inflight is False

    last.set_all_inflight()
    assert head._all_inflight is True
    assert last.abandoned() is True
    assert middle.abandoned() is True
    assert head.abandoned() is True