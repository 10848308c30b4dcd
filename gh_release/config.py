"""Configuration record and loader for the release action.

The CLI collects raw action inputs (strings as forwarded by GitHub Actions)
and hands them to :func:`load_config`, which validates them and returns an
immutable :class:`ReleaseConfig`. Nothing in this module reads the
environment directly.
"""

from __future__ import annotations

import dataclasses
import re
from pathlib import Path

from bool_utils import coerce_bool, coerce_optional_bool

from .errors import ConfigError
from .model import TAG_PREFIX

__all__ = [
    "MAKE_LATEST_VALUES",
    "ReleaseConfig",
    "is_tag",
    "load_config",
    "parse_input_files",
    "tag_name_from_ref",
]

MAKE_LATEST_VALUES = frozenset({"true", "false", "legacy"})

_REPOSITORY_PATTERN = re.compile(r"^[^/\s]+/[^/\s]+$")
_FILES_DELIMITER = re.compile(r"[,\n]")


@dataclasses.dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Validated inputs for a single release run."""

    token: str
    github_ref: str
    repository: str
    name: str | None = None
    body: str | None = None
    tag_name: str | None = None
    files: tuple[str, ...] = ()
    draft: bool | None = None
    prerelease: bool | None = None
    target_commitish: str | None = None
    discussion_category_name: str | None = None
    generate_release_notes: bool | None = None
    make_latest: str | None = None
    fail_on_unmatched_files: bool = False
    overwrite_files: bool = False
    append_body: bool = False

    def release_tag(self) -> str | None:
        """Return the tag to publish, or ``None`` when the run should skip."""
        if self.tag_name:
            return self.tag_name
        if is_tag(self.github_ref):
            return tag_name_from_ref(self.github_ref)
        return None


def is_tag(ref: str) -> bool:
    """Return True if ``ref`` names a tag rather than a branch."""
    return ref.startswith(TAG_PREFIX)


def tag_name_from_ref(ref: str) -> str:
    """Strip the ``refs/tags/`` prefix from ``ref`` exactly once."""
    return ref.removeprefix(TAG_PREFIX)


def parse_input_files(value: str | None) -> list[str]:
    """Split a comma- or newline-delimited ``files`` input into patterns.

    Examples
    --------
    >>> parse_input_files("foo,bar\\nbaz,boom,\\n\\ndoom,loom ")
    ['foo', 'bar', 'baz', 'boom', 'doom', 'loom']
    >>> parse_input_files("")
    []
    """
    if not value:
        return []
    entries = (entry.strip() for entry in _FILES_DELIMITER.split(value))
    return [entry for entry in entries if entry]


def _blank_to_none(value: str | None) -> str | None:
    """Treat empty inputs as absent; Actions forwards unset inputs as ``""``."""
    if value is None:
        return None
    return value if value.strip() else None


def _validate_repository(repository: str | None) -> str:
    repository = (repository or "").strip()
    if not _REPOSITORY_PATTERN.match(repository):
        msg = f"Repository {repository!r} must be in owner/name form."
        raise ConfigError(msg)
    return repository


def _validate_make_latest(value: str | None) -> str | None:
    value = _blank_to_none(value)
    if value is None:
        return None
    normalised = value.strip().lower()
    if normalised not in MAKE_LATEST_VALUES:
        allowed = ", ".join(sorted(MAKE_LATEST_VALUES))
        msg = f"Invalid make_latest {value!r}. Allowed: {allowed}."
        raise ConfigError(msg)
    return normalised


def _read_body(body: str | None, body_path: str | None) -> str | None:
    """Return the release notes, preferring ``body_path`` over ``body``."""
    if body_path := _blank_to_none(body_path):
        try:
            return Path(body_path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            msg = f"Unable to read release body from {body_path}: {exc}"
            raise ConfigError(msg) from exc
    return _blank_to_none(body)


def _optional_bool(value: bool | str | None, parameter: str) -> bool | None:
    try:
        return coerce_optional_bool(value)
    except ValueError as exc:
        msg = f"Invalid value for {parameter}: {value!r}"
        raise ConfigError(msg) from exc


def _flag(value: bool | str | None, parameter: str) -> bool:
    try:
        return coerce_bool(value, default=False)
    except ValueError as exc:
        msg = f"Invalid value for {parameter}: {value!r}"
        raise ConfigError(msg) from exc


def load_config(  # noqa: PLR0913
    *,
    token: str | None,
    github_ref: str | None,
    repository: str | None,
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
) -> ReleaseConfig:
    """Validate raw action inputs and return a :class:`ReleaseConfig`.

    Raises
    ------
    ConfigError
        If the token is missing, the repository is not ``owner/name``, the
        body file cannot be read or decoded as UTF-8, or a boolean or
        ``make_latest`` input has an unrecognised spelling.
    """
    token = _blank_to_none(token)
    if token is None:
        msg = "A GitHub token is required. Set INPUT_TOKEN or GITHUB_TOKEN."
        raise ConfigError(msg)

    return ReleaseConfig(
        token=token,
        github_ref=(github_ref or "").strip(),
        repository=_validate_repository(repository),
        name=_blank_to_none(name),
        body=_read_body(body, body_path),
        tag_name=tag_name_from_ref(tag.strip())
        if (tag := _blank_to_none(tag_name))
        else None,
        files=tuple(parse_input_files(files)),
        draft=_optional_bool(draft, "draft"),
        prerelease=_optional_bool(prerelease, "prerelease"),
        target_commitish=_blank_to_none(target_commitish),
        discussion_category_name=_blank_to_none(discussion_category_name),
        generate_release_notes=_optional_bool(
            generate_release_notes, "generate_release_notes"
        ),
        make_latest=_validate_make_latest(make_latest),
        fail_on_unmatched_files=_flag(
            fail_on_unmatched_files, "fail_on_unmatched_files"
        ),
        overwrite_files=_flag(overwrite_files, "overwrite_files"),
        append_body=_flag(append_body, "append_body"),
    )
