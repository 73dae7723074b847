"""Tests for native messaging framing."""

import io
import json
import struct

import pytest

from jot.core.errors import FramingError
from jot.host.protocol import (
    FrameDecoder,
    FrameReader,
    FrameWriter,
    decode_body,
    encode_frame,
)


def frame(payload: bytes) -> bytes:
    return struct.pack("<I", len(payload)) + payload


class TestEncodeFrame:
    """Tests for encode_frame()."""

    def test_little_endian_length_prefix(self):
        """Four-byte little-endian length, then the JSON body."""
        encoded = encode_frame({"a": 1})

        assert encoded[:4] == struct.pack("<I", len(encoded) - 4)
        assert json.loads(encoded[4:]) == {"a": 1}

    def test_utf8_body(self):
        """Non-ASCII text is sent as UTF-8 and the length counts bytes."""
        encoded = encode_frame({"body": "héllo ✓"})

        (length,) = struct.unpack("<I", encoded[:4])
        assert length == len(encoded) - 4
        assert json.loads(encoded[4:].decode("utf-8")) == {"body": "héllo ✓"}

    def test_oversize_outbound_logs_warning(self, caplog):
        """Messages above the browser's 1 MiB limit are still sent, with a warning."""
        encoded = encode_frame({"data": "x" * (1024 * 1024 + 1)})

        assert len(encoded) > 1024 * 1024
        assert "limit" in caplog.text


class TestDecodeBody:
    """Tests for decode_body()."""

    @pytest.mark.parametrize("body", [b"{not json", b"\xff\xfe", b"[1, 2]", b'"text"'])
    def test_rejects_non_objects(self, body):
        """Invalid JSON or a non-object payload is a framing error."""
        with pytest.raises(FramingError):
            decode_body(body)


class TestFrameDecoder:
    """Tests for FrameDecoder.feed()."""

    def test_byte_at_a_time(self):
        """A frame split at every byte is reassembled once."""
        data = encode_frame({"id": 1, "type": "ping"})
        decoder = FrameDecoder()

        messages = []
        for i in range(len(data)):
            messages.extend(decoder.feed(data[i : i + 1]))

        assert messages == [{"id": 1, "type": "ping"}]
        assert decoder.pending_bytes == 0

    def test_split_inside_length_prefix(self):
        """Partial prefixes are buffered until complete."""
        data = encode_frame({"id": 2})
        decoder = FrameDecoder()

        assert decoder.feed(data[:2]) == []
        assert decoder.pending_bytes == 2
        assert decoder.feed(data[2:]) == [{"id": 2}]

    def test_multiple_frames_in_one_chunk(self):
        """One chunk can complete several frames and start another."""
        first, second, third = (encode_frame({"id": i}) for i in range(3))
        decoder = FrameDecoder()

        assert decoder.feed(first + second + third[:5]) == [{"id": 0}, {"id": 1}]
        assert decoder.feed(third[5:]) == [{"id": 2}]

    def test_oversize_frame(self):
        """A length above the limit is rejected before buffering the body."""
        decoder = FrameDecoder(max_frame_bytes=10)

        with pytest.raises(FramingError, match="exceeds limit"):
            decoder.feed(struct.pack("<I", 11))

    def test_zero_length_frame_is_not_an_object(self):
        """An empty body is invalid JSON."""
        with pytest.raises(FramingError):
            FrameDecoder().feed(struct.pack("<I", 0))


class TestFrameReader:
    """Tests for FrameReader.read()."""

    def test_reads_until_eof(self):
        """Frames are read in order, then None at end of stream."""
        stream = io.BytesIO(encode_frame({"id": 1}) + encode_frame({"id": 2}))
        reader = FrameReader(stream)

        assert reader.read() == {"id": 1}
        assert reader.read() == {"id": 2}
        assert reader.read() is None

    def test_empty_stream(self):
        """An empty stream is a clean end."""
        assert FrameReader(io.BytesIO()).read() is None

    def test_truncated_prefix(self):
        """EOF inside the length prefix is a framing error."""
        with pytest.raises(FramingError, match="length prefix"):
            FrameReader(io.BytesIO(b"\x05\x00")).read()

    def test_truncated_body(self):
        """EOF inside the body is a framing error."""
        data = encode_frame({"id": 1, "type": "ping"})

        with pytest.raises(FramingError, match="body bytes"):
            FrameReader(io.BytesIO(data[:-3])).read()

    def test_oversize_length(self):
        """A declared length above the limit is rejected."""
        stream = io.BytesIO(struct.pack("<I", 100) + b"x" * 100)

        with pytest.raises(FramingError, match="exceeds limit"):
            FrameReader(stream, max_frame_bytes=50).read()

    def test_short_reads(self):
        """Streams that return fewer bytes than asked are read to completion."""

        class Trickle(io.RawIOBase):
            def __init__(self, data):
                self.data = data

            def readable(self):
                return True

            def read(self, size=-1):
                chunk, self.data = self.data[:1], self.data[1:]
                return chunk

        reader = FrameReader(Trickle(encode_frame({"id": "slow"})))

        assert reader.read() == {"id": "slow"}

    def test_bad_json_body(self):
        """A complete frame with invalid JSON is a framing error."""
        with pytest.raises(FramingError, match="Invalid JSON"):
            FrameReader(io.BytesIO(frame(b"{nope"))).read()


class TestFrameWriter:
    """Tests for FrameWriter.write()."""

    def test_writes_one_frame(self):
        """The written bytes decode back to the message."""
        stream = io.BytesIO()

        FrameWriter(stream).write({"id": 1, "ok": True, "data": None})

        assert FrameDecoder().feed(stream.getvalue()) == [
            {"id": 1, "ok": True, "data": None}
        ]
