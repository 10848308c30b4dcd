"""Publish a release for a tag push and attach the matching asset files."""

from __future__ import annotations

import dataclasses
import enum
import logging
import typing as typ

from .errors import ConfigError
from .model import AssetSpec, ReleaseDescriptor, ReleaseHandle, UploadResult
from .resolution import resolve_patterns, unmatched_patterns, validate_patterns

if typ.TYPE_CHECKING:
    from .config import ReleaseConfig

__all__ = [
    "AssetUploader",
    "PublishOutcome",
    "ReleaseSyncer",
    "RunState",
    "build_descriptor",
    "publish_release",
]

logger = logging.getLogger(__name__)


class ReleaseSyncer(typ.Protocol):
    """Capability that creates or updates a release from a descriptor."""

    def sync_release(
        self, token: str, repository: str, descriptor: ReleaseDescriptor
    ) -> ReleaseHandle:
        """Ensure the release described by ``descriptor`` exists."""
        ...


class AssetUploader(typ.Protocol):
    """Capability that attaches files to an existing release."""

    def upload_asset(
        self, token: str, repository: str, release: ReleaseHandle, asset: AssetSpec
    ) -> UploadResult:
        """Upload ``asset`` to ``release``."""
        ...

    def delete_asset(self, token: str, repository: str, asset_id: int) -> None:
        """Remove an existing asset from its release."""
        ...


class RunState(enum.StrEnum):
    """States of a publishing run."""

    SKIPPED = "skipped"
    RELEASED = "released"
    DONE = "done"


@dataclasses.dataclass(slots=True)
class PublishOutcome:
    """Outcome of :func:`publish_release`."""

    state: RunState
    release: ReleaseHandle | None = None
    uploads: list[UploadResult] = dataclasses.field(default_factory=list)


def build_descriptor(
    config: ReleaseConfig, *, default_name_to_tag: bool = True
) -> ReleaseDescriptor:
    """Return the release descriptor for ``config``.

    Parameters
    ----------
    config
        Validated run configuration. Its reference must name a tag unless a
        ``tag_name`` override is set.
    default_name_to_tag
        When True, a release without an explicit name is named after its tag.
        An update only applies that name when the remote release has none.
        When False the name is omitted, so an update keeps the remote name.

    Raises
    ------
    ConfigError
        If no tag can be derived or the derived tag is malformed.
    """
    tag = config.release_tag()
    if tag is None:
        msg = f"Cannot derive a release tag from {config.github_ref!r}."
        raise ConfigError(msg)
    name = config.name
    name_from_tag = name is None and default_name_to_tag
    if name_from_tag:
        name = tag
    return ReleaseDescriptor(
        tag_name=tag,
        name=name,
        body=config.body,
        draft=config.draft,
        prerelease=config.prerelease,
        target_commitish=config.target_commitish,
        discussion_category_name=config.discussion_category_name,
        generate_release_notes=config.generate_release_notes,
        make_latest=config.make_latest,
        name_from_tag=name_from_tag,
        append_body=config.append_body,
    )


def _check_unmatched(config: ReleaseConfig) -> None:
    """Warn about patterns matching nothing, failing if configured to."""
    unmatched = unmatched_patterns(config.files)
    for pattern in unmatched:
        logger.warning(
            "::warning title=Unmatched Pattern::Pattern '%s' does not match any files.",
            pattern,
        )
    if unmatched and config.fail_on_unmatched_files:
        msg = f"Patterns matched no files: {', '.join(unmatched)}"
        raise ConfigError(msg)


def _github_asset_name(name: str) -> str:
    """Return ``name`` as GitHub stores it; spaces become dots."""
    return name.replace(" ", ".")


def _replace_existing(
    config: ReleaseConfig,
    uploader: AssetUploader,
    release: ReleaseHandle,
    asset: AssetSpec,
) -> None:
    asset_id = release.assets.get(_github_asset_name(asset.name))
    if asset_id is None:
        return
    logger.warning(
        "::warning title=Asset Replaced::Deleting previously uploaded asset %s",
        asset.name,
    )
    uploader.delete_asset(config.token, config.repository, asset_id)


def _upload_assets(
    config: ReleaseConfig, uploader: AssetUploader, release: ReleaseHandle
) -> list[UploadResult]:
    """Upload every resolved file in order, stopping at the first failure."""
    results: list[UploadResult] = []
    for path in resolve_patterns(config.files):
        asset = AssetSpec.from_path(path)
        if config.overwrite_files:
            _replace_existing(config, uploader, release, asset)
        print(f"Uploading {asset.name} ({asset.content_type})...")
        results.append(
            uploader.upload_asset(config.token, config.repository, release, asset)
        )
    return results


def publish_release(
    config: ReleaseConfig,
    syncer: ReleaseSyncer,
    uploader: AssetUploader,
    *,
    default_name_to_tag: bool = True,
) -> PublishOutcome:
    """Synchronise the release for ``config`` and upload its assets.

    Parameters
    ----------
    config
        Validated run configuration.
    syncer
        Capability used to create or update the release.
    uploader
        Capability used to attach each resolved file.
    default_name_to_tag
        Forwarded to :func:`build_descriptor`.

    Returns
    -------
    PublishOutcome
        ``SKIPPED`` when the reference is not a tag (no remote call is made),
        otherwise ``DONE`` with the release handle and upload results.

    Raises
    ------
    ReleaseError
        Any error from pattern validation, the syncer or the uploader. Asset
        uploads are fail-fast: the first failure aborts the remaining files.
    """
    if config.release_tag() is None:
        print(f"GitHub Releases requires a tag; skipping {config.github_ref!r}.")
        return PublishOutcome(state=RunState.SKIPPED)

    validate_patterns(config.files)
    _check_unmatched(config)
    descriptor = build_descriptor(config, default_name_to_tag=default_name_to_tag)

    release = syncer.sync_release(config.token, config.repository, descriptor)
    outcome = PublishOutcome(state=RunState.RELEASED, release=release)

    outcome.uploads = _upload_assets(config, uploader, release)
    outcome.state = RunState.DONE
    print(f"Release ready at {release.html_url}")
    return outcome
