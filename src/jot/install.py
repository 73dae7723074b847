"""Native messaging manifest installation.

Browsers only launch hosts that are registered with a manifest in their
NativeMessagingHosts folder; the manifest names the executable and the
extension origins allowed to talk to it.
"""

import json
import logging
import re
import shutil
import sys
from pathlib import Path
from typing import Any

from jot.core.config import HOST_DESCRIPTION, HOST_NAME

logger = logging.getLogger(__name__)

# Chrome extension ids are 32 lowercase letters
EXTENSION_ID_PATTERN = re.compile(r"^[a-z]{32}$")

# Per-user manifest folders, relative to the home directory
_MANIFEST_DIRS = {
    "darwin": {
        "chrome": "Library/Application Support/Google/Chrome/NativeMessagingHosts",
        "chromium": "Library/Application Support/Chromium/NativeMessagingHosts",
        "brave": "Library/Application Support/BraveSoftware/Brave-Browser/NativeMessagingHosts",
        "edge": "Library/Application Support/Microsoft Edge/NativeMessagingHosts",
    },
    "linux": {
        "chrome": ".config/google-chrome/NativeMessagingHosts",
        "chromium": ".config/chromium/NativeMessagingHosts",
        "brave": ".config/BraveSoftware/Brave-Browser/NativeMessagingHosts",
        "edge": ".config/microsoft-edge/NativeMessagingHosts",
    },
}

SUPPORTED_BROWSERS = ("chrome", "chromium", "brave", "edge")


class InstallError(Exception):
    """Raised when the manifest cannot be installed."""

    pass


def is_valid_extension_id(extension_id: str) -> bool:
    """Check the 32-lowercase-letter extension id format."""
    return bool(EXTENSION_ID_PATTERN.match(extension_id))


def manifest_dir(
    browser: str = "chrome", platform: str | None = None, home: Path | None = None
) -> Path:
    """
    Get the per-user NativeMessagingHosts folder for a browser.

    Raises:
        InstallError: If the platform or browser is not supported
    """
    platform = platform or sys.platform
    key = "linux" if platform.startswith("linux") else platform
    dirs = _MANIFEST_DIRS.get(key)
    if dirs is None:
        raise InstallError(f"Unsupported platform: {platform}")
    if browser not in dirs:
        raise InstallError(f"Unsupported browser: {browser}")
    return (home or Path.home()) / dirs[browser]


def find_host_executable() -> Path | None:
    """Locate the installed ``jot-host`` script."""
    found = shutil.which("jot-host")
    if found:
        return Path(found)
    candidate = Path(sys.executable).parent / "jot-host"
    return candidate if candidate.exists() else None


def build_manifest(host_path: Path, extension_ids: list[str]) -> dict[str, Any]:
    """Build the native messaging manifest document."""
    return {
        "name": HOST_NAME,
        "description": HOST_DESCRIPTION,
        "path": str(host_path),
        "type": "stdio",
        "allowed_origins": [
            f"chrome-extension://{ext_id}/" for ext_id in extension_ids
        ],
    }


def install_manifest(
    extension_ids: list[str],
    host_path: Path | None = None,
    browser: str = "chrome",
    target_dir: Path | None = None,
) -> Path:
    """
    Write the host manifest so the browser can launch ``jot-host``.

    Args:
        extension_ids: Extension ids allowed to connect
        host_path: Host executable (defaults to the installed jot-host)
        browser: Browser whose manifest folder to use
        target_dir: Override the manifest folder

    Returns:
        Path to the written manifest

    Raises:
        InstallError: If no extension id is given or the host can't be found
    """
    if not extension_ids:
        raise InstallError("At least one extension id is required")
    for ext_id in extension_ids:
        if not is_valid_extension_id(ext_id):
            logger.warning(
                "Extension id %r doesn't look like a Chrome extension id", ext_id
            )

    host_path = host_path or find_host_executable()
    if host_path is None:
        raise InstallError("jot-host not found on PATH; pass --host-path")

    folder = target_dir or manifest_dir(browser)
    folder.mkdir(parents=True, exist_ok=True)
    manifest_path = folder / f"{HOST_NAME}.json"
    manifest_path.write_text(
        json.dumps(build_manifest(host_path.resolve(), extension_ids), indent=2),
        encoding="utf-8",
    )
    logger.info("Wrote native messaging manifest %s", manifest_path)
    return manifest_path
