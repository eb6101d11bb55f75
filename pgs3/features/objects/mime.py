"""Content type lookup by file extension."""

from __future__ import annotations

from .schemas import DEFAULT_CONTENT_TYPE

CONTENT_TYPES: dict[str, str] = {
    "txt": "text/plain",
    "html": "text/html",
    "htm": "text/html",
    "css": "text/css",
    "js": "application/javascript",
    "json": "application/json",
    "xml": "application/xml",
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "pdf": "application/pdf",
}


def guess_content_type(key: str) -> str:
    """Map the extension after the last ``.`` in ``key`` to a content type.

    Lookup is case-insensitive. Keys without an extension, or with one that is
    not in :data:`CONTENT_TYPES`, get ``application/octet-stream``.
    """
    _, dot, extension = key.rpartition(".")
    if not dot:
        return DEFAULT_CONTENT_TYPE
    return CONTENT_TYPES.get(extension.lower(), DEFAULT_CONTENT_TYPE)
