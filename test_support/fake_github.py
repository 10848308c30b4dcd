"""In-memory GitHub double implementing the release pipeline capabilities."""

from __future__ import annotations

import dataclasses
import typing as typ

from gh_release.model import ReleaseHandle, UploadResult

if typ.TYPE_CHECKING:
    from gh_release.errors import ReleaseError
    from gh_release.model import AssetSpec, ReleaseDescriptor


@dataclasses.dataclass
class FakeRelease:
    """Release state held by :class:`FakeGitHub`."""

    release_id: int
    fields: dict[str, object]
    assets: dict[str, int] = dataclasses.field(default_factory=dict)

    def handle(self, repository: str) -> ReleaseHandle:
        """Return the handle GitHub would report for this release."""
        tag = self.fields["tag_name"]
        return ReleaseHandle(
            release_id=self.release_id,
            html_url=f"https://github.com/{repository}/releases/tag/{tag}",
            assets=dict(self.assets),
        )


class FakeGitHub:
    """Record calls and keep releases in memory, keyed by tag.

    ``upload_failures`` maps an asset name to the error raised when that
    asset is uploaded.
    """

    def __init__(
        self,
        *,
        upload_failures: dict[str, ReleaseError] | None = None,
        sync_failure: ReleaseError | None = None,
    ) -> None:
        self.releases: dict[str, FakeRelease] = {}
        self.calls: list[tuple[str, ...]] = []
        self.uploaded: list[AssetSpec] = []
        self.upload_failures = upload_failures or {}
        self.sync_failure = sync_failure
        self._next_id = 1

    def _allocate_id(self) -> int:
        value = self._next_id
        self._next_id += 1
        return value

    def sync_release(
        self, token: str, repository: str, descriptor: ReleaseDescriptor
    ) -> ReleaseHandle:
        """Create or update the release for ``descriptor.tag_name``."""
        self.calls.append(("sync_release", repository, descriptor.tag_name))
        if self.sync_failure is not None:
            raise self.sync_failure
        existing = self.releases.get(descriptor.tag_name)
        if existing is None:
            existing = FakeRelease(
                release_id=self._allocate_id(), fields=descriptor.payload()
            )
            self.releases[descriptor.tag_name] = existing
        else:
            existing.fields.update(descriptor.update_payload(existing.fields))
        return existing.handle(repository)

    def upload_asset(
        self, token: str, repository: str, release: ReleaseHandle, asset: AssetSpec
    ) -> UploadResult:
        """Record ``asset`` against ``release`` or raise a configured failure."""
        self.calls.append(("upload_asset", repository, asset.name))
        if failure := self.upload_failures.get(asset.name):
            raise failure
        self.uploaded.append(asset)
        asset_id = self._allocate_id()
        for stored in self.releases.values():
            if stored.release_id == release.release_id:
                stored.assets[asset.name] = asset_id
        return UploadResult(name=asset.name, status_code=201, asset_id=asset_id)

    def delete_asset(self, token: str, repository: str, asset_id: int) -> None:
        """Remove the asset with ``asset_id`` from whichever release holds it."""
        self.calls.append(("delete_asset", repository, str(asset_id)))
        for stored in self.releases.values():
            stored.assets = {
                name: value for name, value in stored.assets.items() if value != asset_id
            }

    @property
    def network_calls(self) -> int:
        """Number of capability calls made so far."""
        return len(self.calls)


__all__ = ["FakeGitHub", "FakeRelease"]
