"""Helpers that encode remote ids into host-facing file references."""

from __future__ import annotations

PUBLIC_PREFIX = "/content/images/"


def compose_reference(remote_id: str, ext: str) -> str:
    """Build the path string the host persists for an uploaded file."""
    return PUBLIC_PREFIX + remote_id + ext


def remote_id_from_path(path: str) -> str:
    """Recover the remote id from a stored reference or a route-relative path.

    Accepts both ``/content/images/<id><ext>`` and ``/<id><ext>``. Only the
    first ``.`` is significant, so ``/abc.tar.gz`` yields ``abc``.
    """
    relative = path[1:] if path.startswith("/") else path
    prefix = PUBLIC_PREFIX.lstrip("/")
    if relative.startswith(prefix):
        relative = relative[len(prefix):]
    return relative.split(".", 1)[0]
