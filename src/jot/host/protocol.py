"""Native messaging framing.

Each message is a 4-byte little-endian unsigned length followed by that many
bytes of UTF-8 JSON. The same framing is used in both directions.
"""

import json
import logging
import struct
from typing import Any, BinaryIO

from jot.core.config import MAX_INBOUND_FRAME_BYTES, MAX_OUTBOUND_FRAME_BYTES
from jot.core.errors import FramingError

logger = logging.getLogger(__name__)

LENGTH_PREFIX = struct.Struct("<I")


def encode_frame(message: dict[str, Any]) -> bytes:
    """Encode a message as length prefix + UTF-8 JSON."""
    body = json.dumps(message, ensure_ascii=False).encode("utf-8")
    if len(body) > MAX_OUTBOUND_FRAME_BYTES:
        logger.warning(
            "Outgoing message is %d bytes, above the browser's %d byte limit",
            len(body),
            MAX_OUTBOUND_FRAME_BYTES,
        )
    return LENGTH_PREFIX.pack(len(body)) + body


def decode_body(body: bytes) -> dict[str, Any]:
    """Decode a frame body into a JSON object."""
    try:
        message = json.loads(body.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise FramingError(f"Invalid JSON: {e}") from e
    if not isinstance(message, dict):
        raise FramingError(f"Expected a JSON object, got {type(message).__name__}")
    return message


class FrameDecoder:
    """Incremental decoder for chunked input.

    Bytes can arrive split anywhere, including inside the length prefix,
    so partial data is buffered until a whole frame is available.
    """

    def __init__(self, max_frame_bytes: int = MAX_INBOUND_FRAME_BYTES):
        self.max_frame_bytes = max_frame_bytes
        self._buffer = bytearray()
        self._expected: int | None = None

    @property
    def pending_bytes(self) -> int:
        """Bytes buffered toward an incomplete frame."""
        return len(self._buffer)

    def feed(self, chunk: bytes) -> list[dict[str, Any]]:
        """
        Add a chunk and return every message it completes.

        Raises:
            FramingError: If a length exceeds the limit or a body is not JSON
        """
        self._buffer.extend(chunk)
        messages = []
        while True:
            if self._expected is None:
                if len(self._buffer) < LENGTH_PREFIX.size:
                    break
                (length,) = LENGTH_PREFIX.unpack_from(self._buffer)
                if length > self.max_frame_bytes:
                    raise FramingError(
                        f"Frame of {length} bytes exceeds limit of {self.max_frame_bytes}"
                    )
                del self._buffer[: LENGTH_PREFIX.size]
                self._expected = length

            if len(self._buffer) < self._expected:
                break
            body = bytes(self._buffer[: self._expected])
            del self._buffer[: self._expected]
            self._expected = None
            messages.append(decode_body(body))
        return messages


class FrameReader:
    """Reads whole messages from a blocking binary stream."""

    def __init__(
        self, stream: BinaryIO, max_frame_bytes: int = MAX_INBOUND_FRAME_BYTES
    ):
        self.stream = stream
        self.max_frame_bytes = max_frame_bytes

    def _read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes, looping over short reads."""
        chunks = []
        remaining = size
        while remaining > 0:
            chunk = self.stream.read(remaining)
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        return b"".join(chunks)

    def read(self) -> dict[str, Any] | None:
        """
        Read the next message.

        Returns:
            The decoded message, or None on a clean end of stream

        Raises:
            FramingError: On a truncated frame, oversize length or bad JSON
        """
        prefix = self._read_exact(LENGTH_PREFIX.size)
        if not prefix:
            return None
        if len(prefix) < LENGTH_PREFIX.size:
            raise FramingError("Stream closed inside a length prefix")

        (length,) = LENGTH_PREFIX.unpack(prefix)
        if length > self.max_frame_bytes:
            raise FramingError(
                f"Frame of {length} bytes exceeds limit of {self.max_frame_bytes}"
            )

        body = self._read_exact(length)
        if len(body) < length:
            raise FramingError(
                f"Stream closed after {len(body)} of {length} body bytes"
            )
        return decode_body(body)


class FrameWriter:
    """Writes framed messages to a binary stream, one write per message."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def write(self, message: dict[str, Any]) -> None:
        self.stream.write(encode_frame(message))
        self.stream.flush()
