"""Tests for native messaging manifest installation."""

import json
import logging

import pytest

import jot.install as install
from jot.install import (
    InstallError,
    build_manifest,
    install_manifest,
    is_valid_extension_id,
    manifest_dir,
)

EXTENSION_ID = "abcdefghijklmnopabcdefghijklmnop"


@pytest.fixture
def host_exe(tmp_path):
    """A fake installed host script."""
    path = tmp_path / "bin" / "jot-host"
    path.parent.mkdir()
    path.write_text("#!/bin/sh\n")
    return path


class TestManifestDir:
    """Tests for manifest_dir()."""

    def test_linux_chrome(self, tmp_path):
        """Chrome on Linux uses ~/.config/google-chrome."""
        assert manifest_dir("chrome", "linux", tmp_path) == (
            tmp_path / ".config/google-chrome/NativeMessagingHosts"
        )

    def test_macos_chromium(self, tmp_path):
        """Chromium on macOS uses Application Support."""
        assert manifest_dir("chromium", "darwin", tmp_path) == (
            tmp_path / "Library/Application Support/Chromium/NativeMessagingHosts"
        )

    def test_unsupported_platform(self, tmp_path):
        """Platforms without a per-user manifest folder are rejected."""
        with pytest.raises(InstallError, match="Unsupported platform"):
            manifest_dir("chrome", "win32", tmp_path)

    def test_unsupported_browser(self, tmp_path):
        """Unknown browsers are rejected."""
        with pytest.raises(InstallError, match="Unsupported browser"):
            manifest_dir("netscape", "linux", tmp_path)


class TestInstallManifest:
    """Tests for build_manifest() and install_manifest()."""

    def test_extension_id_format(self):
        """Ids are 32 lowercase letters."""
        assert is_valid_extension_id(EXTENSION_ID)
        assert not is_valid_extension_id("ABCDEFGHIJKLMNOPABCDEFGHIJKLMNOP")
        assert not is_valid_extension_id("short")

    def test_build_manifest(self, host_exe):
        """The manifest names the host and allows each extension origin."""
        manifest = build_manifest(host_exe, [EXTENSION_ID])

        assert manifest == {
            "name": "com.jot.host",
            "description": manifest["description"],
            "path": str(host_exe),
            "type": "stdio",
            "allowed_origins": [f"chrome-extension://{EXTENSION_ID}/"],
        }

    def test_writes_manifest(self, tmp_path, host_exe):
        """The manifest is written as <host name>.json in the target folder."""
        target = tmp_path / "NativeMessagingHosts"

        path = install_manifest([EXTENSION_ID], host_path=host_exe, target_dir=target)

        assert path == target / "com.jot.host.json"
        assert json.loads(path.read_text())["path"] == str(host_exe.resolve())

    def test_requires_extension_id(self, tmp_path, host_exe):
        """At least one extension id is needed."""
        with pytest.raises(InstallError):
            install_manifest([], host_path=host_exe, target_dir=tmp_path)

    def test_warns_on_odd_extension_id(self, tmp_path, host_exe, caplog):
        """Ids that don't look like Chrome ids are allowed with a warning."""
        caplog.set_level(logging.WARNING, logger="jot.install")

        install_manifest(["dev-build"], host_path=host_exe, target_dir=tmp_path)

        assert "dev-build" in caplog.text

    def test_host_not_found(self, tmp_path, monkeypatch):
        """Without an installed host, a path must be given."""
        monkeypatch.setattr(install, "find_host_executable", lambda: None)

        with pytest.raises(InstallError, match="not found"):
            install_manifest([EXTENSION_ID], target_dir=tmp_path)
