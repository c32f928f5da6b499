"""Service-account authentication against the Google identity provider.

Every storage operation starts by exchanging the configured service credential
for a short-lived bearer token scoped to full Drive access. The resulting
``AuthorizedSession`` is a ``requests.Session`` that attaches the token to each
call. Token reuse across operations is opt-in.
"""

from __future__ import annotations

import json
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2 import service_account

from drive_storage.config import Settings
from drive_storage.errors import AuthError

logger = logging.getLogger(__name__)

API_SCOPES = ["https://www.googleapis.com/auth/drive"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


@dataclass(frozen=True)
class ServiceAccountKey:
    """Identity email plus private signing key of a service account."""

    client_email: str
    private_key: str = field(repr=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, object]) -> "ServiceAccountKey":
        """Build a key from a parsed service-account JSON document."""
        missing = [name for name in ("client_email", "private_key") if not data.get(name)]
        if missing:
            logger.error(f"Service account key is missing fields: {', '.join(missing)}")
            raise AuthError(f"Service account key is missing fields: {', '.join(missing)}")
        return cls(client_email=str(data["client_email"]), private_key=str(data["private_key"]))

    @classmethod
    def from_file(cls, path: str | Path) -> "ServiceAccountKey":
        try:
            with open(path, encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.error(f"Could not load service account key from {path}: {exc}")
            raise AuthError(f"Could not load service account key from {path}") from exc
        if not isinstance(data, dict):
            logger.error(f"Service account key in {path} is not a JSON object")
            raise AuthError(f"Service account key in {path} is not a JSON object")
        return cls.from_mapping(data)

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceAccountKey":
        if settings.drive_key_file:
            return cls.from_file(settings.drive_key_file)
        return cls.from_mapping(
            {
                "client_email": settings.drive_client_email,
                "private_key": settings.drive_private_key,
            }
        )


def _open_session(credentials: service_account.Credentials) -> AuthorizedSession:
    # A 401 must surface to the caller: a replayed upload would send an empty body
    return AuthorizedSession(credentials, refresh_status_codes=())


class DriveAuthenticator:
    """Mint authorized sessions from a service-account key.

    With ``reuse_token`` disabled (the default) every call performs a fresh
    token exchange. When enabled, the last credentials are kept and refreshed
    under a lock once google-auth reports them expired.
    """

    def __init__(self, key: ServiceAccountKey, reuse_token: bool = False) -> None:
        self._key = key
        self._reuse_token = reuse_token
        self._lock = threading.Lock()
        self._credentials: service_account.Credentials | None = None

    def authenticate(self) -> AuthorizedSession:
        """Return a session carrying a valid bearer token.

        Raises:
            AuthError: If the key is malformed or the token exchange fails
        """
        if not self._reuse_token:
            return _open_session(self._authorize())

        with self._lock:
            if self._credentials is None or not self._credentials.valid:
                self._credentials = self._authorize()
            return _open_session(self._credentials)

    def _authorize(self) -> service_account.Credentials:
        info = {
            "client_email": self._key.client_email,
            "private_key": self._key.private_key,
            "token_uri": TOKEN_URI,
        }
        try:
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=API_SCOPES
            )
        except (ValueError, TypeError) as exc:
            logger.error(f"Service account credential is malformed: {exc}")
            raise AuthError("Service account credential is malformed") from exc

        try:
            credentials.refresh(Request())
        except GoogleAuthError as exc:
            logger.error(f"Token exchange for {self._key.client_email} failed: {exc}")
            raise AuthError(f"Token exchange for {self._key.client_email} failed") from exc

        logger.debug("Obtained access token for %s", self._key.client_email)
        return credentials
