"""Pytest configuration for the release action tests."""

from __future__ import annotations

import typing as typ
import uuid

import httpx
import pytest

from gh_release.config import ReleaseConfig
from test_support.fake_github import FakeGitHub

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

Handler = typ.Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """Mock transport that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []
        self.bodies: list[bytes] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.bodies.append(request.read())
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture(name="fake_token")
def fixture_fake_token() -> str:
    """Generate a unique but fake token for GitHub API requests."""
    return f"test-token-{uuid.uuid4().hex}"


@pytest.fixture
def fake_github() -> FakeGitHub:
    """Return an empty in-memory GitHub double."""
    return FakeGitHub()


@pytest.fixture
def make_config(fake_token: str) -> cabc.Callable[..., ReleaseConfig]:
    """Return a factory for :class:`ReleaseConfig` with tag-push defaults."""

    def _make(**overrides: object) -> ReleaseConfig:
        values: dict[str, object] = {
            "token": fake_token,
            "github_ref": "refs/tags/v1.0.0",
            "repository": "octocat/hello",
        }
        values.update(overrides)
        return ReleaseConfig(**values)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def make_http_client() -> cabc.Iterator[
    cabc.Callable[[Handler], tuple[httpx.Client, RecordingTransport]]
]:
    """Return a factory building clients backed by :class:`RecordingTransport`."""
    clients: list[httpx.Client] = []

    def _make(handler: Handler) -> tuple[httpx.Client, RecordingTransport]:
        transport = RecordingTransport(handler)
        client = httpx.Client(transport=transport)
        clients.append(client)
        return client, transport

    yield _make
    for client in clients:
        client.close()


@pytest.fixture
def dist_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create a ``dist`` directory with three artefacts and chdir beside it."""
    dist = tmp_path / "dist"
    dist.mkdir()
    (dist / "app-linux.tar.gz").write_bytes(b"linux")
    (dist / "app-macos.zip").write_bytes(b"macos")
    (dist / "app.sha256").write_text("abc  app\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    return dist
