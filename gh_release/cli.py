"""Command-line entry point for the release action.

Inputs are read from the environment the way GitHub Actions provides them:
``GITHUB_REF``, ``GITHUB_REPOSITORY`` and ``GITHUB_TOKEN`` from the runner and
``INPUT_*`` variables for the action inputs.

Examples
--------
Publish the release for a tag with every file under ``dist``::

    GITHUB_TOKEN=ghp_... GITHUB_REF=refs/tags/v1.2.3 \
        GITHUB_REPOSITORY=octocat/hello INPUT_FILES='dist/*' gh-release

Branch pushes are skipped with exit status 0::

    GITHUB_TOKEN=ghp_... GITHUB_REF=refs/heads/main \
        GITHUB_REPOSITORY=octocat/hello gh-release
"""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from actions_common import normalize_input_env

from .config import load_config
from .errors import ReleaseError
from .github import DEFAULT_API_URL, GitHubClient
from .output import prepare_output_data, write_github_output
from .pipeline import publish_release

if typ.TYPE_CHECKING:
    import httpx

    from .pipeline import PublishOutcome

__all__ = ["app", "main", "run"]

app: App = App(
    help="Publish a GitHub release for a tag push and upload its assets.",
    config=cyclopts.config.Env("INPUT_", command=False),
)


def _write_outputs(outcome: PublishOutcome) -> None:
    """Append release outputs for downstream steps."""
    output_path = os.environ.get("GITHUB_OUTPUT")
    if not output_path:
        return
    write_github_output(Path(output_path), prepare_output_data(outcome))


def main(  # noqa: PLR0913
    *,
    token: str | None,
    github_ref: str | None,
    repository: str | None,
    api_url: str = DEFAULT_API_URL,
    name: str | None = None,
    body: str | None = None,
    body_path: str | None = None,
    tag_name: str | None = None,
    files: str | None = None,
    draft: bool | str | None = None,
    prerelease: bool | str | None = None,
    target_commitish: str | None = None,
    discussion_category_name: str | None = None,
    generate_release_notes: bool | str | None = None,
    make_latest: str | None = None,
    fail_on_unmatched_files: bool | str | None = None,
    overwrite_files: bool | str | None = None,
    append_body: bool | str | None = None,
    http_client: httpx.Client | None = None,
) -> int:
    """Entry point shared by the CLI and tests.

    Parameters
    ----------
    http_client
        Optional pre-configured client, used by tests to stub the transport.
        All other parameters mirror the action inputs.

    Returns
    -------
    int
        Exit code: ``0`` when the release was published or the run skipped,
        ``1`` when configuration, the GitHub API or an upload fails.
    """
    try:
        config = load_config(
            token=token,
            github_ref=github_ref,
            repository=repository,
            name=name,
            body=body,
            body_path=body_path,
            tag_name=tag_name,
            files=files,
            draft=draft,
            prerelease=prerelease,
            target_commitish=target_commitish,
            discussion_category_name=discussion_category_name,
            generate_release_notes=generate_release_notes,
            make_latest=make_latest,
            fail_on_unmatched_files=fail_on_unmatched_files,
            overwrite_files=overwrite_files,
            append_body=append_body,
        )
        with GitHubClient(api_url=api_url, client=http_client) as client:
            outcome = publish_release(config, client, client)
    except ReleaseError as exc:
        print(f"::error title=Release Failure::{exc}", file=sys.stderr)
        return 1

    _write_outputs(outcome)
    return 0


@app.default
def cli(  # noqa: PLR0913
    *,
    token: typ.Annotated[
        str | None, Parameter(env_var=["INPUT_TOKEN", "GITHUB_TOKEN"])
    ] = None,
    github_ref: typ.Annotated[str | None, Parameter(env_var="GITHUB_REF")] = None,
    repository: typ.Annotated[
        str | None, Parameter(env_var=["INPUT_REPOSITORY", "GITHUB_REPOSITORY"])
    ] = None,
    api_url: typ.Annotated[
        str, Parameter(env_var="GITHUB_API_URL")
    ] = DEFAULT_API_URL,
    name: str | None = None,
    body: str | None = None,
    body_path: str | None = None,
    tag_name: str | None = None,
    files: str | None = None,
    # Flags stay strings here; load_config coerces them through bool_utils.
    draft: str | None = None,
    prerelease: str | None = None,
    target_commitish: str | None = None,
    discussion_category_name: str | None = None,
    generate_release_notes: str | None = None,
    make_latest: str | None = None,
    fail_on_unmatched_files: str | None = None,
    overwrite_files: str | None = None,
    append_body: str | None = None,
) -> None:
    """Publish the release for the pushed tag and upload matching files.

    Creates the release when the tag has none and updates it otherwise, then
    uploads every file matched by ``files`` one at a time.
    """
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    exit_code = main(
        token=token,
        github_ref=github_ref,
        repository=repository,
        api_url=api_url,
        name=name,
        body=body,
        body_path=body_path,
        tag_name=tag_name,
        files=files,
        draft=draft,
        prerelease=prerelease,
        target_commitish=target_commitish,
        discussion_category_name=discussion_category_name,
        generate_release_notes=generate_release_notes,
        make_latest=make_latest,
        fail_on_unmatched_files=fail_on_unmatched_files,
        overwrite_files=overwrite_files,
        append_body=append_body,
    )
    raise SystemExit(exit_code)


def run() -> None:
    """Console script entry point."""
    normalize_input_env()
    app()


if __name__ == "__main__":
    run()
