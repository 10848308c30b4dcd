"""Tests for :mod:`gh_release.content_type`."""

from __future__ import annotations

from pathlib import Path

import pytest

from gh_release.content_type import DEFAULT_CONTENT_TYPE, infer_content_type


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("tests/data/foo/bar.txt", "text/plain"),
        ("foo.tar.gz", "application/gzip"),
        ("dist/app.zip", "application/zip"),
        ("docs/index.html", "text/html"),
        ("metadata.json", "application/json"),
    ],
)
def test_returns_specific_type_for_common_extensions(path: str, expected: str) -> None:
    """Known extensions map to their registered type."""
    assert infer_content_type(path) == expected


@pytest.mark.parametrize(
    "path",
    ["umbiguous-file", "foo.uncommon", "dist/app.", "Makefile", ""],
)
def test_defaults_to_octet_stream(path: str) -> None:
    """Unknown or missing extensions fall back to the binary stream type."""
    assert infer_content_type(path) == DEFAULT_CONTENT_TYPE == "application/octet-stream"


def test_accepts_path_objects() -> None:
    """``Path`` instances are accepted as well as strings."""
    assert infer_content_type(Path("dist") / "notes.txt") == "text/plain"
