"""Host and client sessions over a framed byte stream.

HostSession is the host side: it owns the transport and runs requests one
at a time, each to completion, so filesystem effects never interleave.
HostClient is the caller side: it numbers requests and keeps a slot per
in-flight id so responses can be matched back to their requests.
"""

import logging
import subprocess
from typing import Any

from jot.core.errors import FramingError
from jot.core.types import Response
from jot.host.dispatcher import Dispatcher
from jot.host.protocol import FrameReader, FrameWriter

logger = logging.getLogger(__name__)


class HostSession:
    """Serves framed requests from one client until the stream ends."""

    def __init__(self, reader: FrameReader, writer: FrameWriter, dispatcher: Dispatcher):
        """
        Initialize host session.

        Args:
            reader: Source of request frames
            writer: Sink for response frames
            dispatcher: Routes requests to store operations
        """
        self.reader = reader
        self.writer = writer
        self.dispatcher = dispatcher
        self.handled = 0

    def serve_one(self) -> bool:
        """
        Read, handle and answer a single request.

        Returns:
            False when the stream has ended, True otherwise

        Raises:
            FramingError: If the incoming frame is malformed
        """
        message = self.reader.read()
        if message is None:
            return False
        response = self.dispatcher.dispatch(message)
        self.writer.write(response.to_wire())
        self.handled += 1
        return True

    def serve(self) -> int:
        """
        Serve until end of stream or a transport failure.

        Returns:
            Number of requests handled
        """
        try:
            while self.serve_one():
                pass
        except FramingError as e:
            logger.error("Closing session on malformed frame: %s", e)
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.info("Client went away: %s", e)
        else:
            logger.info("Input closed after %d requests", self.handled)
        return self.handled


class HostClient:
    """Sends requests to a host and correlates responses by id."""

    def __init__(self, reader: FrameReader, writer: FrameWriter):
        """
        Initialize client.

        Args:
            reader: Source of response frames
            writer: Sink for request frames
        """
        self.reader = reader
        self.writer = writer
        self.pending: dict[int, Response | None] = {}
        self._next_id = 1
        self._process: subprocess.Popen | None = None

    @classmethod
    def spawn(cls, command: list[str]) -> "HostClient":
        """Start a host process and talk to it over its stdin/stdout."""
        process = subprocess.Popen(
            command, stdin=subprocess.PIPE, stdout=subprocess.PIPE
        )
        client = cls(FrameReader(process.stdout), FrameWriter(process.stdin))
        client._process = process
        return client

    def send(self, request_type: str, **params: Any) -> int:
        """
        Send a request without waiting for its response.

        Returns:
            The id assigned to the request
        """
        request_id = self._next_id
        self._next_id += 1
        self.pending[request_id] = None
        self.writer.write({"id": request_id, "type": request_type, **params})
        return request_id

    def receive(self) -> Response | None:
        """
        Read one response and file it under its pending id.

        Returns:
            The response, or None if its id matches no pending request

        Raises:
            FramingError: If the stream ends or carries a malformed frame
        """
        message = self.reader.read()
        if message is None:
            raise FramingError("Host closed the stream")

        response = Response.model_validate(message)
        if response.id not in self.pending:
            logger.debug("Ignoring response with unmatched id %r", response.id)
            return None
        self.pending[response.id] = response
        return response

    def wait_for(self, request_id: int) -> Response:
        """Read responses until the one for ``request_id`` has arrived."""
        if request_id not in self.pending:
            raise KeyError(f"No pending request with id {request_id}")
        while self.pending.get(request_id) is None:
            self.receive()
        return self.pending.pop(request_id)

    def request(self, request_type: str, **params: Any) -> Response:
        """Send a request and wait for its response."""
        return self.wait_for(self.send(request_type, **params))

    def close(self) -> None:
        """Close the request stream; a spawned host exits on end of input."""
        self.writer.stream.close()
        if self._process is not None:
            self._process.wait()
            self._process.stdout.close()
