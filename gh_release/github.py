"""GitHub REST client for release synchronisation and asset uploads.

:class:`GitHubClient` implements both capabilities the pipeline needs:
``sync_release`` (create-or-update a release by tag) and ``upload_asset``
(attach a file to a release). Every failure is mapped onto the closed
taxonomy in :mod:`gh_release.errors`; nothing is retried.
"""

from __future__ import annotations

import logging
import typing as typ
from urllib.parse import quote

import httpx

from .errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    TransportError,
)
from .model import ReleaseHandle, UploadResult

if typ.TYPE_CHECKING:
    import types

    from .model import AssetSpec, ReleaseDescriptor

__all__ = [
    "DEFAULT_API_URL",
    "DEFAULT_UPLOADS_URL",
    "GitHubClient",
    "uploads_url_for",
]

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_UPLOADS_URL = "https://uploads.github.com"
USER_AGENT = "gh-release-action"

_API_TIMEOUT = httpx.Timeout(30.0)
_UPLOAD_TIMEOUT = httpx.Timeout(300.0, connect=30.0)
_ERROR_DETAIL_LIMIT = 1024


def _truncate_text(value: str, limit: int, *, suffix: str = "…") -> str:
    """Return ``value`` truncated to ``limit`` characters with ``suffix``."""
    if len(value) <= limit:
        return value
    return value[:limit] + suffix


def _extract_error_detail(response: httpx.Response) -> str:
    """Return a truncated error detail string for exceptions."""
    detail = response.text.strip() or response.reason_phrase or ""
    return _truncate_text(detail, _ERROR_DETAIL_LIMIT)


def _is_rate_limited(response: httpx.Response) -> bool:
    """Check if a 403 response is a rate limit rather than a permission error."""
    if "retry-after" in response.headers:
        return True
    return response.headers.get("x-ratelimit-remaining") == "0"


def _raise_for_response(response: httpx.Response, context: str) -> typ.NoReturn:
    """Raise the :class:`ReleaseError` matching an unsuccessful ``response``."""
    status = response.status_code
    detail = _extract_error_detail(response)

    if status == httpx.codes.UNAUTHORIZED:
        message = (
            f"GitHub rejected the token while {context} (401 Unauthorized). "
            "Verify that the token is correct and has not expired."
        )
        raise AuthError(f"{message} ({detail})", status_code=status)

    if status == httpx.codes.FORBIDDEN and not _is_rate_limited(response):
        message = (
            f"GitHub token lacks permission for {context}. "
            "Use a token with contents:write scope."
        )
        raise AuthError(f"{message} ({detail})", status_code=status)

    if status == httpx.codes.NOT_FOUND:
        message = (
            f"GitHub returned 404 while {context}. Check that the repository "
            "exists and that the token can access it."
        )
        raise NotFoundError(message, status_code=status)

    message = f"GitHub API request failed with status {status} while {context}"
    raise TransportError(f"{message}: {detail or 'Unknown error'}", status_code=status)


def _json_object(response: httpx.Response, context: str) -> dict[str, typ.Any]:
    """Return the JSON object in ``response`` or raise :class:`TransportError`."""
    try:
        payload = response.json()
    except ValueError as exc:
        preview = _truncate_text(response.text, 500, suffix="...")
        message = f"GitHub API returned invalid JSON while {context}: {preview}"
        raise TransportError(message, status_code=response.status_code) from exc
    if not isinstance(payload, dict):
        message = f"GitHub API response was not a JSON object while {context}."
        raise TransportError(message, status_code=response.status_code)
    return payload


def _strip_uri_template(url: str) -> str:
    """Drop the ``{?name,label}`` suffix GitHub appends to ``upload_url``."""
    return url.split("{", 1)[0]


def _handle_from_payload(payload: dict[str, typ.Any], context: str) -> ReleaseHandle:
    release_id = payload.get("id")
    html_url = payload.get("html_url")
    if not isinstance(release_id, int) or not isinstance(html_url, str):
        message = f"GitHub API response lacks release id or html_url while {context}."
        raise TransportError(message)
    upload_url = payload.get("upload_url")
    assets = {
        asset["name"]: asset["id"]
        for asset in payload.get("assets") or []
        if isinstance(asset, dict)
        and isinstance(asset.get("name"), str)
        and isinstance(asset.get("id"), int)
    }
    return ReleaseHandle(
        release_id=release_id,
        html_url=html_url,
        upload_url=_strip_uri_template(upload_url)
        if isinstance(upload_url, str)
        else None,
        assets=assets,
    )


def _is_duplicate_asset(response: httpx.Response) -> bool:
    """Return True if a 422 upload response reports an existing asset name."""
    if response.status_code != httpx.codes.UNPROCESSABLE_ENTITY:
        return False
    try:
        payload = response.json()
    except ValueError:
        return False
    if not isinstance(payload, dict):
        return False
    errors = payload.get("errors") or []
    return any(
        isinstance(error, dict) and error.get("code") == "already_exists"
        for error in errors
    )


def uploads_url_for(api_url: str) -> str:
    """Return the uploads host paired with ``api_url``.

    GitHub Enterprise Server serves uploads from ``/api/uploads`` next to the
    ``/api/v3`` REST root.
    """
    api_url = api_url.rstrip("/")
    if api_url == DEFAULT_API_URL:
        return DEFAULT_UPLOADS_URL
    return f"{api_url.removesuffix('/api/v3')}/api/uploads"


class GitHubClient:
    """Release and asset client backed by :class:`httpx.Client`.

    Parameters
    ----------
    api_url
        Root of the REST API, ``https://api.github.com`` by default.
    uploads_url
        Root of the uploads API. Derived from ``api_url`` when omitted.
    client
        Pre-configured :class:`httpx.Client`. When omitted, the instance
        creates and owns one; use the object as a context manager to close
        it.
    """

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        uploads_url: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self._api_url = api_url.rstrip("/")
        self._uploads_url = (uploads_url or uploads_url_for(self._api_url)).rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=_API_TIMEOUT,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=False,
        )

    def __enter__(self) -> GitHubClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: types.TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def _send(
        self,
        method: str,
        url: str,
        *,
        token: str,
        context: str,
        headers: dict[str, str] | None = None,
        timeout: httpx.Timeout = _API_TIMEOUT,
        **kwargs: typ.Any,  # noqa: ANN401
    ) -> httpx.Response:
        request_headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        } | (headers or {})
        logger.debug("%s %s", method, url)
        try:
            return self._client.request(
                method, url, headers=request_headers, timeout=timeout, **kwargs
            )
        except httpx.TimeoutException as exc:
            message = f"GitHub API request timed out while {context}: {exc!s}"
            raise TransportError(message) from exc
        except httpx.RequestError as exc:
            message = f"Failed to reach GitHub API while {context}: {exc!s}"
            raise TransportError(message) from exc

    def _releases_url(self, repository: str) -> str:
        return f"{self._api_url}/repos/{repository}/releases"

    def sync_release(
        self, token: str, repository: str, descriptor: ReleaseDescriptor
    ) -> ReleaseHandle:
        """Create or update the release for ``descriptor.tag_name``.

        The lookup and the following write are separate requests, so two
        concurrent runs for the same tag may race. An update sends
        :meth:`ReleaseDescriptor.update_payload`, so a name taken from the tag
        never replaces a name already set on the release.

        Raises
        ------
        AuthError
            If GitHub rejects the token.
        NotFoundError
            If the repository is unknown or inaccessible.
        TransportError
            On network failures, timeouts or unexpected responses.
        """
        tag = descriptor.tag_name
        releases_url = self._releases_url(repository)
        lookup = self._send(
            "GET",
            f"{releases_url}/tags/{quote(tag, safe='')}",
            token=token,
            context=f"looking up the release for tag {tag}",
        )

        if lookup.status_code == httpx.codes.NOT_FOUND:
            commit = descriptor.target_commitish
            logger.info(
                "Creating new GitHub release for tag %s%s...",
                tag,
                f" using commit {commit!r}" if commit else "",
            )
            context = f"creating the release for tag {tag}"
            response = self._send(
                "POST",
                releases_url,
                token=token,
                context=context,
                json=descriptor.payload(),
            )
        elif lookup.status_code == httpx.codes.OK:
            remote = _json_object(lookup, "reading the existing release")
            existing = _handle_from_payload(remote, "reading the existing release")
            commit = descriptor.target_commitish
            if commit and commit != remote.get("target_commitish"):
                logger.info(
                    "Updating commit from %r to %r",
                    remote.get("target_commitish"),
                    commit,
                )
            logger.info("Updating release %s for tag %s", existing.release_id, tag)
            context = f"updating release {existing.release_id} for tag {tag}"
            response = self._send(
                "PATCH",
                f"{releases_url}/{existing.release_id}",
                token=token,
                context=context,
                json=descriptor.update_payload(remote),
            )
        else:
            _raise_for_response(lookup, f"looking up the release for tag {tag}")

        if not response.is_success:
            _raise_for_response(response, context)
        return _handle_from_payload(_json_object(response, context), context)

    def upload_asset(
        self, token: str, repository: str, release: ReleaseHandle, asset: AssetSpec
    ) -> UploadResult:
        """Stream ``asset`` to ``release`` and return the upload outcome.

        The file is opened for the duration of the request only.

        Raises
        ------
        AuthError
            If GitHub rejects the token.
        ConflictError
            If the release already has an asset named ``asset.name``.
        TransportError
            On network failures, timeouts or unexpected responses.
        """
        url = release.upload_url or (
            f"{self._uploads_url}/repos/{repository}"
            f"/releases/{release.release_id}/assets"
        )
        context = f"uploading asset {asset.name}"
        try:
            size = asset.path.stat().st_size
            with asset.path.open("rb") as handle:
                response = self._send(
                    "POST",
                    url,
                    token=token,
                    context=context,
                    params={"name": asset.name},
                    headers={
                        "Content-Type": asset.content_type,
                        "Content-Length": str(size),
                    },
                    content=handle,
                    timeout=_UPLOAD_TIMEOUT,
                )
        except OSError as exc:
            message = f"Unable to read asset {asset.path}: {exc}"
            raise TransportError(message) from exc

        if _is_duplicate_asset(response):
            message = (
                f"Release {release.release_id} already has an asset named "
                f"{asset.name}. Enable overwrite_files to replace it."
            )
            raise ConflictError(message, status_code=response.status_code)
        if not response.is_success:
            _raise_for_response(response, context)

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = {}
        asset_id = payload.get("id")
        download_url = payload.get("browser_download_url")
        return UploadResult(
            name=asset.name,
            status_code=response.status_code,
            asset_id=asset_id if isinstance(asset_id, int) else None,
            download_url=download_url if isinstance(download_url, str) else None,
        )

    def delete_asset(self, token: str, repository: str, asset_id: int) -> None:
        """Delete a previously uploaded release asset."""
        context = f"deleting release asset {asset_id}"
        response = self._send(
            "DELETE",
            f"{self._releases_url(repository)}/assets/{asset_id}",
            token=token,
            context=context,
        )
        if not response.is_success:
            _raise_for_response(response, context)
