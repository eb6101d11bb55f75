"""Content-derived ETag."""

from __future__ import annotations

_ETAG_SEED = 5381
_ETAG_MASK = (1 << 64) - 1


def compute_etag(content: bytes) -> str:
    """Return the ETag for ``content`` as lowercase hex.

    Rolling multiplicative hash (``h = h * 33 + byte``) kept to 64 bits and
    zero-padded to at least eight digits. It marks content changes and is not
    a digest: do not use it for integrity checks.

    Example:
        >>> compute_etag(b"")
        '00001505'
    """
    h = _ETAG_SEED
    for byte in content:
        h = (h * 33 + byte) & _ETAG_MASK
    return format(h, "08x")
