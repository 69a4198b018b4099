import pytest

from sctpwire.chunkheader import ParseError
from sctpwire.sack import GapAckBlock, SelectiveAck


def test_gap_ack_block_str():
    assert str(GapAckBlock(100, 200)) == "100 - 200"


def test_marshal_wire_bytes_without_blocks():
    sack = SelectiveAck(cumulative_tsn_ack=1000, advertised_receiver_window_credit=1500)
    raw = sack.marshal()
    assert raw[:4] == b"\x03\x00\x00\x10"
    assert raw[4:8] == (1000).to_bytes(4, "big")
    assert raw[8:12] == (1500).to_bytes(4, "big")
    assert raw[12:] == b"\x00\x00\x00\x00"


def test_round_trip():
    original = SelectiveAck(
        cumulative_tsn_ack=1000,
        advertised_receiver_window_credit=1500,
        gap_ack_blocks=[GapAckBlock(100, 200), GapAckBlock(300, 301)],
        duplicate_tsn=[5, 0xFFFFFFFF],
    )
    raw = original.marshal()
    parsed = SelectiveAck.unmarshal(raw)
    assert parsed == original
    assert parsed.marshal() == raw
    assert len(raw) == 4 + 12 + 4 * 2 + 4 * 2


def test_unmarshal_wrong_type():
    raw = bytearray(SelectiveAck().marshal())
    raw[0] = 7
    with pytest.raises(ParseError, match="not of type SACK"):
        SelectiveAck.unmarshal(bytes(raw))


def test_unmarshal_header_too_small():
    with pytest.raises(ParseError, match="not large enough"):
        SelectiveAck.unmarshal(b"\x03\x00\x00\x08\x00\x00\x00\x01")


def test_unmarshal_count_mismatch():
    raw = bytearray(SelectiveAck(gap_ack_blocks=[GapAckBlock(1, 2)]).marshal())
    raw[13] = 2  # claim two gap blocks while only one is present
    with pytest.raises(ParseError, match="does not match"):
        SelectiveAck.unmarshal(bytes(raw))


def test_unmarshal_chunk_header_too_short():
    with pytest.raises(ParseError):
        SelectiveAck.unmarshal(b"\x03")


def test_check_does_not_abort():
    assert SelectiveAck().check() is False


def test_str():
    sack = SelectiveAck(
        cumulative_tsn_ack=1,
        advertised_receiver_window_credit=2,
        gap_ack_blocks=[GapAckBlock(100, 200)],
        duplicate_tsn=[3, 4],
    )
    assert str(sack) == "SACK cumTsnAck=1 arwnd=2 dupTsn=[3 4]\n gap ack: 100 - 200"