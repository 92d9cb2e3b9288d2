"""Shared pytest fixtures for crxwatch tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from crxwatch.core.config.models import PackageDescriptor, WatcherConfig
from crxwatch.core.io import FakeFileSystem
from crxwatch.core.process import ExitOutcome, FakeProcessRunner

# ============================================================================
# Payload helpers
# ============================================================================

WEBSTORE_PREFIX = ")]}'\n"


def webstore_body(version: str) -> bytes:
    """Build a web-store detail response carrying ``version`` at [1][1][6]."""
    payload = [0, [0, [0, 0, 0, 0, 0, 0, version]]]
    return (WEBSTORE_PREFIX + json.dumps(payload)).encode()


def manifest_xml(package_id: str, version: str, codebase: str) -> bytes:
    """Build a minimal gupdate manifest listing one app."""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<gupdate xmlns="http://www.google.com/update2/response" protocol="2.0">\n'
        f'  <app appid="{package_id}">\n'
        f'    <updatecheck codebase="{codebase}" version="{version}"/>\n'
        "  </app>\n"
        "</gupdate>\n"
    ).encode()


# ============================================================================
# Path Fixtures
# ============================================================================


@pytest.fixture
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


# ============================================================================
# Model Fixtures
# ============================================================================


@pytest.fixture
def make_package() -> Callable[..., PackageDescriptor]:
    """Factory for package descriptors with sensible defaults."""

    def _make(
        name: str = "blocksi",
        *,
        display_name: str | None = None,
        package_id: str | None = None,
        manifest_url: str | None = None,
        diff_enabled: bool = True,
    ) -> PackageDescriptor:
        return PackageDescriptor(
            name=name,
            display_name=display_name or name.title(),
            package_id=package_id or f"{name}-id",
            manifest_url=manifest_url,
            diff_enabled=diff_enabled,
        )

    return _make


@pytest.fixture
def watcher_config(tmp_path: Path) -> WatcherConfig:
    """Config rooted at a temporary work dir with no builtin packages."""
    return WatcherConfig(work_dir=tmp_path, use_builtin_packages=False)


# ============================================================================
# Capability Fixtures
# ============================================================================


@pytest.fixture
def fake_fs() -> FakeFileSystem:
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def fake_runner() -> FakeProcessRunner:
    """Process runner where every program succeeds with no output."""
    return FakeProcessRunner(lambda args, cwd: ExitOutcome(returncode=0))


@pytest.fixture
def make_webstore_body() -> Callable[[str], bytes]:
    """Factory for web-store detail responses."""
    return webstore_body


@pytest.fixture
def make_manifest() -> Callable[[str, str, str], bytes]:
    """Factory for single-app update manifests."""
    return manifest_xml


# ============================================================================
# Network Fixtures
# ============================================================================


class FakeStore:
    """Scriptable web store and update server behind an ``httpx.MockTransport``.

    ``versions`` maps package IDs to their published version. IDs listed in
    ``broken_metadata`` answer metadata requests with HTTP 500 and IDs in
    ``broken_downloads`` answer artifact downloads with HTTP 404.
    """

    def __init__(self) -> None:
        self.versions: dict[str, str] = {}
        self.manifests: dict[str, bytes] = {}
        self.broken_metadata: set[str] = set()
        self.broken_downloads: set[str] = set()
        self.requests: list[httpx.Request] = []

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    def downloads(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "clients2.google.com"]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = request.url

        if url.host == "chrome.google.com":
            package_id = url.params["id"]
            if package_id in self.broken_metadata or package_id not in self.versions:
                return httpx.Response(500, text="internal error")
            return httpx.Response(200, content=webstore_body(self.versions[package_id]))

        if url.host == "clients2.google.com":
            package_id = url.params["x"].split("&")[0].removeprefix("id=")
            if package_id in self.broken_downloads:
                return httpx.Response(404, text="not found")
            return httpx.Response(200, content=b"Cr24\x03\x00\x00\x00" + package_id.encode())

        manifest = self.manifests.get(str(url))
        if manifest is None:
            return httpx.Response(404)
        return httpx.Response(200, content=manifest)


def tool_handler(diff_text: str = "", diff_stderr: str = ""):
    """Process handler imitating unzip, prettier and diff.

    unzip writes a file named after the release into its working directory.
    """

    def _handle(args: list[str], cwd: Path | None) -> ExitOutcome:
        program = args[0]
        if program == "unzip" and cwd is not None:
            (cwd / "background.js").write_text(f"// {cwd.name}\n")
            return ExitOutcome(returncode=0, stdout="Archive: ../x.crx\n")
        if program == "diff":
            return ExitOutcome(
                returncode=1 if diff_text else 0, stdout=diff_text, stderr=diff_stderr
            )
        return ExitOutcome(returncode=0)

    return _handle


@pytest.fixture
def fake_store() -> FakeStore:
    """Provide an empty FakeStore."""
    return FakeStore()


@pytest.fixture
def make_tool_handler():
    """Factory for process handlers imitating the external tools."""
    return tool_handler
