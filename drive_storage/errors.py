"""Error taxonomy raised by storage adapters."""

from __future__ import annotations


class StorageError(Exception):
    """Base class for every failure surfaced by a storage adapter."""

    def __init__(self, message: str, remote_id: str | None = None) -> None:
        super().__init__(message)
        self.remote_id = remote_id


class AuthError(StorageError):
    """Credential is malformed or the token exchange was rejected."""


class UploadError(StorageError):
    """Object creation or the public-read grant failed."""


class ReadError(StorageError):
    """The media fetch failed or its stream broke off."""


class DeleteError(StorageError):
    """The remote delete call failed."""
