"""Publish GitHub releases for tag pushes and upload their assets.

The package is split along the pipeline stages: :mod:`.config` validates the
action inputs, :mod:`.resolution` and :mod:`.content_type` turn glob patterns
into upload units, :mod:`.github` talks to the REST API and :mod:`.pipeline`
sequences a run.
"""

from __future__ import annotations

from .config import ReleaseConfig, load_config
from .content_type import infer_content_type
from .errors import (
    AuthError,
    ConfigError,
    ConflictError,
    NotFoundError,
    ReleaseError,
    TransportError,
)
from .github import GitHubClient
from .model import AssetSpec, ReleaseDescriptor, ReleaseHandle, UploadResult
from .pipeline import (
    AssetUploader,
    PublishOutcome,
    ReleaseSyncer,
    RunState,
    build_descriptor,
    publish_release,
)
from .resolution import resolve_patterns

__all__ = [
    "AssetSpec",
    "AssetUploader",
    "AuthError",
    "ConfigError",
    "ConflictError",
    "GitHubClient",
    "NotFoundError",
    "PublishOutcome",
    "ReleaseConfig",
    "ReleaseDescriptor",
    "ReleaseError",
    "ReleaseHandle",
    "ReleaseSyncer",
    "RunState",
    "TransportError",
    "UploadResult",
    "build_descriptor",
    "infer_content_type",
    "load_config",
    "publish_release",
    "resolve_patterns",
]
