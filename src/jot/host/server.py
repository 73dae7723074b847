"""Native messaging host wiring - stdio transport around the thread store."""

import logging
import sys
from typing import BinaryIO

from jot.core.settings import ConfigStore
from jot.core.store import ThreadStore
from jot.host.dispatcher import Dispatcher
from jot.host.protocol import FrameReader, FrameWriter
from jot.host.session import HostSession

logger = logging.getLogger(__name__)


def build_session(
    stdin: BinaryIO,
    stdout: BinaryIO,
    store: ThreadStore | None = None,
) -> HostSession:
    """Create a host session reading requests from stdin and answering on stdout."""
    store = store or ThreadStore(ConfigStore())
    return HostSession(FrameReader(stdin), FrameWriter(stdout), Dispatcher(store))


def run_host(store: ThreadStore | None = None) -> int:
    """
    Serve the browser extension over this process's stdin/stdout.

    Returns:
        Number of requests handled before the browser closed the pipe
    """
    session = build_session(sys.stdin.buffer, sys.stdout.buffer, store)
    logger.info(
        "Host started (config: %s)",
        session.dispatcher.store.config_store.config_file,
    )
    return session.serve()
