"""Value objects passed between the release pipeline stages."""

from __future__ import annotations

import dataclasses
import typing as typ
from pathlib import Path

from .content_type import infer_content_type
from .errors import ConfigError

__all__ = [
    "TAG_PREFIX",
    "AssetSpec",
    "ReleaseDescriptor",
    "ReleaseHandle",
    "UploadResult",
]

TAG_PREFIX = "refs/tags/"

_LOCAL_FIELDS = frozenset({"name_from_tag", "append_body"})


@dataclasses.dataclass(frozen=True, slots=True)
class ReleaseDescriptor:
    """Desired state of a GitHub release.

    Attributes
    ----------
    tag_name : str
        Tag the release is attached to, without the ``refs/tags/`` prefix.
    name : str or None
        Display name. ``None`` leaves the remote value unchanged on update.
    body : str or None
        Release notes text.
    draft : bool or None
        Whether the release is a draft.
    prerelease : bool or None
        Whether the release is flagged as a prerelease.
    target_commitish : str or None
        Commit or branch the tag is created from when it does not exist yet.
    discussion_category_name : str or None
        Discussion category to link the release to.
    generate_release_notes : bool or None
        Ask GitHub to generate the notes from merged pull requests.
    make_latest : str or None
        One of ``"true"``, ``"false"`` or ``"legacy"``.
    name_from_tag : bool
        ``name`` was filled in from the tag rather than given explicitly. An
        update then keeps a remote name that is already set.
    append_body : bool
        Append ``body`` to the remote release notes on update instead of
        replacing them.
    """

    tag_name: str
    name: str | None = None
    body: str | None = None
    draft: bool | None = None
    prerelease: bool | None = None
    target_commitish: str | None = None
    discussion_category_name: str | None = None
    generate_release_notes: bool | None = None
    make_latest: str | None = None
    name_from_tag: bool = False
    append_body: bool = False

    def __post_init__(self) -> None:
        if not self.tag_name:
            msg = "Release tag name must not be empty."
            raise ConfigError(msg)
        if self.tag_name.startswith(TAG_PREFIX):
            msg = f"Release tag name {self.tag_name!r} still carries {TAG_PREFIX!r}."
            raise ConfigError(msg)

    def payload(self) -> dict[str, str | bool]:
        """Return the JSON body of the create request."""
        fields = dataclasses.asdict(self)
        return {
            key: value
            for key, value in fields.items()
            if value is not None and key not in _LOCAL_FIELDS
        }

    def update_payload(
        self, existing: typ.Mapping[str, typ.Any]
    ) -> dict[str, str | bool]:
        """Return the JSON body of the update request for ``existing``.

        ``existing`` is the release object GitHub returned for the tag.

        Examples
        --------
        >>> descriptor = ReleaseDescriptor(
        ...     tag_name="v1", name="v1", name_from_tag=True, body="more",
        ...     append_body=True,
        ... )
        >>> descriptor.update_payload({"name": "Launch", "body": "notes"})
        {'tag_name': 'v1', 'body': 'notes\\nmore'}
        """
        payload = self.payload()
        if self.name_from_tag and existing.get("name"):
            payload.pop("name", None)
        existing_body = existing.get("body")
        if self.append_body and self.body and existing_body:
            payload["body"] = f"{existing_body}\n{self.body}"
        return payload


@dataclasses.dataclass(frozen=True, slots=True)
class ReleaseHandle:
    """Identifier and URLs of a synchronised release."""

    release_id: int
    html_url: str
    upload_url: str | None = None
    assets: typ.Mapping[str, int] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True, slots=True)
class AssetSpec:
    """File queued for upload to a release."""

    path: Path
    content_type: str
    name: str

    @classmethod
    def from_path(cls, path: Path | str, *, name: str | None = None) -> AssetSpec:
        """Build an asset for ``path`` named after its base name by default."""
        path = Path(path)
        return cls(
            path=path,
            content_type=infer_content_type(path),
            name=name or path.name,
        )


@dataclasses.dataclass(frozen=True, slots=True)
class UploadResult:
    """Outcome of a single asset upload."""

    name: str
    status_code: int
    asset_id: int | None = None
    download_url: str | None = None
