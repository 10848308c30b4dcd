"""Tests for the :mod:`gh_release.cli` entry points."""

from __future__ import annotations

import json
import sys
import typing as typ

import httpx
import pytest

from gh_release import cli

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from conftest import Handler, RecordingTransport

    ClientFactory = cabc.Callable[[Handler], tuple[httpx.Client, RecordingTransport]]

REPO = "octocat/hello"
RELEASE = {
    "id": 11,
    "html_url": f"https://github.com/{REPO}/releases/tag/v1.0.0",
    "upload_url": f"https://uploads.github.com/repos/{REPO}/releases/11/assets{{?name}}",
}


def _release_api(request: httpx.Request) -> httpx.Response:
    if request.method == "GET":
        return httpx.Response(404, json={"message": "Not Found"})
    if request.url.host == "uploads.github.com":
        name = request.url.params["name"]
        return httpx.Response(201, json={"id": 12, "name": name})
    return httpx.Response(201, json=RELEASE)


class TestMain:
    """Tests for the main function."""

    def test_branch_push_exits_zero_without_requests(
        self,
        make_http_client: ClientFactory,
        fake_token: str,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Skipped runs succeed, call nothing and write no outputs."""
        output = tmp_path / "output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output))
        http, transport = make_http_client(_release_api)

        exit_code = cli.main(
            token=fake_token,
            github_ref="refs/heads/main",
            repository=REPO,
            http_client=http,
        )

        assert exit_code == 0
        assert transport.requests == []
        assert not output.exists()

    def test_publishes_and_writes_outputs(
        self,
        make_http_client: ClientFactory,
        fake_token: str,
        dist_dir: Path,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """A tag push creates the release, uploads files and records outputs."""
        output = tmp_path / "output"
        monkeypatch.setenv("GITHUB_OUTPUT", str(output))
        http, transport = make_http_client(_release_api)

        exit_code = cli.main(
            token=fake_token,
            github_ref="refs/tags/v1.0.0",
            repository=REPO,
            files="dist/*.zip\ndist/*.sha256",
            draft="false",
            http_client=http,
        )

        assert exit_code == 0
        assert [r.method for r in transport.requests] == ["GET", "POST", "POST", "POST"]
        assert json.loads(transport.bodies[1]) == {
            "tag_name": "v1.0.0",
            "name": "v1.0.0",
            "draft": False,
        }
        lines = output.read_text(encoding="utf-8").splitlines()
        assert lines == [
            'assets=["app-macos.zip", "app.sha256"]',
            "id=11",
            f"upload_url=https://uploads.github.com/repos/{REPO}/releases/11/assets",
            f"url=https://github.com/{REPO}/releases/tag/v1.0.0",
        ]

    def test_configuration_error_exits_one(
        self,
        make_http_client: ClientFactory,
        fake_token: str,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Invalid inputs are reported as workflow errors before any request."""
        http, transport = make_http_client(_release_api)

        exit_code = cli.main(
            token=fake_token,
            github_ref="refs/tags/v1.0.0",
            repository="not-a-repository",
            http_client=http,
        )

        assert exit_code == 1
        assert transport.requests == []
        err = capsys.readouterr().err
        assert err.startswith("::error title=Release Failure::")
        assert "owner/name" in err

    def test_invalid_pattern_exits_one_before_requests(
        self,
        make_http_client: ClientFactory,
        fake_token: str,
        dist_dir: Path,
    ) -> None:
        """Malformed patterns fail the run before GitHub is contacted."""
        http, transport = make_http_client(_release_api)

        exit_code = cli.main(
            token=fake_token,
            github_ref="refs/tags/v1.0.0",
            repository=REPO,
            files="dist/[abc",
            http_client=http,
        )

        assert exit_code == 1
        assert transport.requests == []

    def test_api_failure_exits_one(
        self,
        make_http_client: ClientFactory,
        fake_token: str,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """An authentication failure maps to exit status 1."""
        http, _ = make_http_client(
            lambda request: httpx.Response(401, text="Bad credentials")
        )

        exit_code = cli.main(
            token=fake_token,
            github_ref="refs/tags/v1.0.0",
            repository=REPO,
            http_client=http,
        )

        assert exit_code == 1
        assert "401 Unauthorized" in capsys.readouterr().err

    def test_undecodable_body_file_exits_one(
        self,
        make_http_client: ClientFactory,
        fake_token: str,
        tmp_path: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """A body file that is not UTF-8 fails the run with a workflow error."""
        notes = tmp_path / "notes.md"
        notes.write_bytes(b"\xff\xfe caf\xe9")
        http, transport = make_http_client(_release_api)

        exit_code = cli.main(
            token=fake_token,
            github_ref="refs/tags/v1.0.0",
            repository=REPO,
            body_path=str(notes),
            http_client=http,
        )

        assert exit_code == 1
        assert transport.requests == []
        assert "Unable to read release body" in capsys.readouterr().err


class TestRun:
    """Tests for the console script entry point."""

    def test_reads_runner_environment(
        self,
        fake_token: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Runner variables are read from the environment."""
        monkeypatch.setattr(sys, "argv", ["gh-release"])
        monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
        monkeypatch.setenv("GITHUB_TOKEN", fake_token)
        monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
        monkeypatch.setenv("GITHUB_REPOSITORY", REPO)

        with pytest.raises(SystemExit) as excinfo:
            cli.run()

        assert excinfo.value.code == 0
        assert "skipping 'refs/heads/main'" in capsys.readouterr().out

    def test_missing_token_exits_one(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Without any token the run fails with a configuration error."""
        monkeypatch.setattr(sys, "argv", ["gh-release"])
        for name in ("GITHUB_TOKEN", "INPUT_TOKEN"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setenv("GITHUB_REF", "refs/tags/v1.0.0")
        monkeypatch.setenv("GITHUB_REPOSITORY", REPO)

        with pytest.raises(SystemExit) as excinfo:
            cli.run()

        assert excinfo.value.code == 1
        assert "token is required" in capsys.readouterr().err

    def test_flag_inputs_from_environment(
        self,
        fake_token: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Boolean inputs exported by the runner are accepted as strings."""
        monkeypatch.setattr(sys, "argv", ["gh-release"])
        monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
        monkeypatch.setenv("GITHUB_TOKEN", fake_token)
        monkeypatch.setenv("GITHUB_REF", "refs/heads/main")
        monkeypatch.setenv("GITHUB_REPOSITORY", REPO)
        monkeypatch.setenv("INPUT_DRAFT", "true")
        monkeypatch.setenv("INPUT_FAIL_ON_UNMATCHED_FILES", "false")
        monkeypatch.setenv("INPUT_OVERWRITE_FILES", "")
        monkeypatch.setenv("INPUT_APPEND_BODY", "false")

        with pytest.raises(SystemExit) as excinfo:
            cli.run()

        assert excinfo.value.code == 0
        assert "skipping 'refs/heads/main'" in capsys.readouterr().out

    def test_invalid_flag_input_exits_one(
        self,
        fake_token: str,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """An unrecognised boolean spelling is reported as a release failure."""
        monkeypatch.setattr(sys, "argv", ["gh-release"])
        monkeypatch.setenv("GITHUB_TOKEN", fake_token)
        monkeypatch.setenv("GITHUB_REF", "refs/tags/v1.0.0")
        monkeypatch.setenv("GITHUB_REPOSITORY", REPO)
        monkeypatch.setenv("INPUT_DRAFT", "maybe")

        with pytest.raises(SystemExit) as excinfo:
            cli.run()

        assert excinfo.value.code == 1
        assert "Invalid value for draft" in capsys.readouterr().err
