"""Write release results to the GitHub Actions output file."""

from __future__ import annotations

import json
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .pipeline import PublishOutcome

__all__ = ["prepare_output_data", "write_github_output"]


def prepare_output_data(outcome: PublishOutcome) -> dict[str, str]:
    """Return the workflow outputs describing a published release.

    A skipped run has no release and therefore no outputs.
    """
    handle = outcome.release
    if handle is None:
        return {}
    return {
        "id": str(handle.release_id),
        "url": handle.html_url,
        "upload_url": handle.upload_url or "",
        "assets": json.dumps([upload.name for upload in outcome.uploads]),
    }


def _format_output(key: str, value: str) -> str:
    """Format a value for GitHub Actions output with escaping."""
    escaped = value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
    return f"{key}={escaped}\n"


def write_github_output(file: Path, values: dict[str, str]) -> None:
    """Append ``values`` to the GitHub Actions output ``file``."""
    if not values:
        return
    file.parent.mkdir(parents=True, exist_ok=True)
    with file.open("a", encoding="utf-8") as handle:
        for key, value in sorted(values.items()):
            handle.write(_format_output(key, value))
