"""Drive v3 REST calls used by the storage adapter."""

from __future__ import annotations

import logging
from typing import BinaryIO

import requests

logger = logging.getLogger(__name__)

API_BASE_URL = "https://www.googleapis.com/drive/v3"
UPLOAD_BASE_URL = "https://www.googleapis.com/upload/drive/v3"


class DriveClient:
    """Thin wrapper around an authorized ``requests`` session.

    Every method raises ``requests.HTTPError`` on a non-2xx answer; mapping to
    the storage error taxonomy is left to the adapter.
    """

    def __init__(self, session: requests.Session, timeout: int | None = None) -> None:
        self._session = session
        self._timeout = timeout

    def create_file(self, name: str, mime_type: str, stream: BinaryIO) -> str:
        """Upload ``stream`` as a new file and return its id.

        Uses a resumable session so the body is streamed from the file object
        instead of being assembled in memory.
        """
        start = self._session.post(
            f"{UPLOAD_BASE_URL}/files",
            params={"uploadType": "resumable"},
            json={"name": name},
            headers={"X-Upload-Content-Type": mime_type},
            timeout=self._timeout,
        )
        start.raise_for_status()
        upload_url = start.headers["Location"]

        response = self._session.put(
            upload_url,
            data=stream,
            headers={"Content-Type": mime_type},
            timeout=self._timeout,
        )
        response.raise_for_status()
        file_id = response.json()["id"]
        logger.debug("Created Drive file %s (%s)", file_id, name)
        return file_id

    def grant_public_read(self, file_id: str) -> None:
        response = self._session.post(
            f"{API_BASE_URL}/files/{file_id}/permissions",
            params={"supportsAllDrives": "true", "supportsTeamDrives": "true"},
            json={"type": "anyone", "role": "reader"},
            timeout=self._timeout,
        )
        response.raise_for_status()

    def open_media(self, file_id: str) -> requests.Response:
        """Start downloading a file's content; the caller must close the response."""
        response = self._session.get(
            f"{API_BASE_URL}/files/{file_id}",
            params={"alt": "media"},
            stream=True,
            timeout=self._timeout,
        )
        try:
            response.raise_for_status()
        except requests.HTTPError:
            response.close()
            raise
        return response

    def delete_file(self, file_id: str) -> None:
        response = self._session.delete(
            f"{API_BASE_URL}/files/{file_id}",
            timeout=self._timeout,
        )
        response.raise_for_status()
