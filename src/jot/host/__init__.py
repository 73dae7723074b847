"""Native messaging host: framing, dispatch and the stdio session."""

from jot.host.dispatcher import Dispatcher
from jot.host.protocol import FrameDecoder, FrameReader, FrameWriter, encode_frame
from jot.host.session import HostClient, HostSession

__all__ = [
    "Dispatcher",
    "FrameDecoder",
    "FrameReader",
    "FrameWriter",
    "HostClient",
    "HostSession",
    "encode_frame",
]
