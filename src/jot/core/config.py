"""Configuration management for the jot host."""

import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_int(key: str, default: int) -> int:
    """Get environment variable as integer."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# Host identity
HOST_NAME = "com.jot.host"
HOST_VERSION = "1.0.0"
HOST_DESCRIPTION = "Jot filesystem bridge for Obsidian vault integration"

# Per-user config directory (defaults to ~/.jot). Not created at import time:
# the config file only appears after the first successful setConfig.
JOT_CONFIG_DIR = Path(
    get_env("JOT_CONFIG_DIR", os.path.expanduser("~/.jot"))
    or os.path.expanduser("~/.jot")
).expanduser()

CONFIG_FILE = JOT_CONFIG_DIR / "config.json"

# Vault layout
DEFAULT_COMMENT_FOLDER = "Jot"
INDEX_FILENAME = ".jot-index.json"

# Native messaging limits: the browser sends at most 64 MiB to the host and
# accepts at most 1 MiB back
MAX_INBOUND_FRAME_BYTES = get_env_int("JOT_MAX_FRAME_BYTES", 64 * 1024 * 1024)
MAX_OUTBOUND_FRAME_BYTES = 1024 * 1024

# Logging. stdout carries the protocol, so logs go to stderr ("-") or a file.
LOG_LEVEL = get_env("JOT_LOG_LEVEL", "INFO")
LOG_FILE = get_env("JOT_LOG_FILE", "-")


def setup_logging(log_file: str | None = LOG_FILE) -> logging.Logger:
    """Configure and return logger.

    Args:
        log_file: Path to the log file, "-" for stderr, None to use stderr.
    """
    handler: logging.Handler
    if not log_file or log_file == "-":
        handler = logging.StreamHandler(sys.stderr)
    else:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, (LOG_LEVEL or "INFO").upper(), logging.INFO),
        handlers=[handler],
    )
    return logging.getLogger(__name__)
