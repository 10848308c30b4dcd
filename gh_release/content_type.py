"""Infer the ``Content-Type`` declared for an uploaded release asset."""

from __future__ import annotations

import mimetypes
import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path

__all__ = ["DEFAULT_CONTENT_TYPE", "infer_content_type"]

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# ``mimetypes`` reports ``.tar.gz`` as ``application/x-tar`` with a gzip
# encoding; the uploaded bytes are the compressed stream.
_ENCODING_TYPES: dict[str, str] = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
    "br": "application/x-brotli",
}


def infer_content_type(path: str | Path) -> str:
    """Return the MIME type for ``path`` based on its extension.

    Unknown or missing extensions fall back to :data:`DEFAULT_CONTENT_TYPE`.

    Examples
    --------
    >>> infer_content_type("notes.txt")
    'text/plain'
    >>> infer_content_type("dist/app.tar.gz")
    'application/gzip'
    >>> infer_content_type("umbiguous-file")
    'application/octet-stream'
    """
    content_type, encoding = mimetypes.guess_type(str(path), strict=False)
    if encoding:
        return _ENCODING_TYPES.get(encoding, DEFAULT_CONTENT_TYPE)
    return content_type or DEFAULT_CONTENT_TYPE
