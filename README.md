# sctpwire

`sctpwire` reads and writes the wire format of SCTP (RFC 4960, with the
stream re-configuration and partial-reliability extensions). It uses only
the standard library.

## What is in it

- `sctpwire.packet`
  - `Packet`: source and destination ports, verification tag and a list of
    chunks. `Packet.unmarshal(raw)` decodes the chunks and verifies the
    CRC32c checksum; `marshal()` pads every chunk to four bytes and fills
    in the checksum.
  - `generate_packet_checksum(raw)`: the CRC32c of a packet with its
    checksum field taken as zero.
  - `ControlQueue`: a FIFO of packets with `push`, `push_all`, `pop_all`
    (drains the queue, oldest first) and `len()`.
- Chunks, each with `unmarshal(raw)` (a class method), `marshal()` and
  `check()`:
  - `sctpwire.init`: `Init`, `InitAck`, sharing the body `InitCommon`
  - `sctpwire.payload_data`: `PayloadData` (DATA), with
    `PayloadProtocolIdentifier` and `payload_type_name`
  - `sctpwire.sack`: `SelectiveAck` and `GapAckBlock`
  - `sctpwire.reconfig`: `Reconfig`
  - `sctpwire.forward_tsn`: `ForwardTSN` and `ForwardTSNStream`
  - `sctpwire.shutdown`: `Shutdown`, `ShutdownAck`, `ShutdownComplete`
  - `sctpwire.heartbeat`: `Heartbeat` and `HeartbeatAck` (the latter can
    only be encoded, and needs exactly one `HeartbeatInfo` parameter)
- `sctpwire.chunkheader`: `ChunkHeader` (type, flags, value bytes),
  `ParseError`, `get_padding` and `pad_bytes`.
- `sctpwire.chunktype`: the `ChunkType` enum and `chunk_type_name`.
- `sctpwire.params`: `ParamType`, the generic `Param`, and
  `ForwardTSNSupported`, `HeartbeatInfo`, `Random`, `ChunkList` and
  `OutgoingResetRequest`; `parse_param_type` reads a parameter's type and
  `build_param` decodes it into the matching class.
- `sctpwire.errorcause`: `ErrorCauseCode`, the generic `ErrorCause`, and
  `InvalidMandatoryParameter`, `UnrecognizedChunkType` and
  `ProtocolViolation`; `build_error_cause` decodes a cause into the
  matching class.

## Installation

```
pip install sctpwire
```

## Usage

Parse a packet and write it back:

```python
from sctpwire.packet import Packet

raw = bytes([0x13, 0x88, 0x13, 0x88, 0x00, 0x00, 0x00, 0x00,
             0x06, 0xA9, 0x00, 0xE1])
packet = Packet.unmarshal(raw)
assert packet.source_port == 5000
assert packet.marshal() == raw
```

Build a chunk yourself:

```python
from sctpwire.shutdown import Shutdown

chunk = Shutdown(cumulative_tsn_ack=0x12345678)
assert chunk.marshal() == bytes([0x07, 0x00, 0x00, 0x08, 0x12, 0x34, 0x56, 0x78])
```

Decode a parameter:

```python
from sctpwire.params import build_param, parse_param_type

raw = bytes([0xC0, 0x00, 0x00, 0x04])
param = build_param(parse_param_type(raw), raw)
assert param.marshal() == raw
```

## Errors

Malformed input, and values that cannot be encoded, raise
`sctpwire.chunkheader.ParseError` (a `ValueError`).

`check()` returns whether the chunk calls for aborting the association:
`True` for `ForwardTSN` and `Reconfig`, `False` for the others. `Init.check()`
and `InitAck.check()` raise `sctpwire.init.AbortError` when the initiate tag
or a stream count is zero, or the advertised receiver window is below 1500.

## What it does not do

This is a codec only. It opens no sockets and keeps no association state:
there is no handshake, retransmission, congestion control or stream API.
Inside a `Packet`, ABORT, ERROR, COOKIE-ECHO and COOKIE-ACK chunks are kept
as plain `ChunkHeader` values with their contents undecoded, and a packet
holding a HEARTBEAT-ACK, ECNE or other unlisted chunk type is rejected
with `ParseError`.

## Running the tests

```
pip install -e .[test]
pytest
```