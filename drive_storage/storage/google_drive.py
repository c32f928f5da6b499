"""Google Drive-backed storage adapter.

Files uploaded through the host end up as Drive files shared with "anyone
with the link"; the host only keeps ``/content/images/<file id><ext>``.
Each operation authenticates on its own, then performs its Drive calls.
"""

from __future__ import annotations

import logging
from contextlib import closing
from typing import Callable, Iterator

import requests
from fastapi.responses import StreamingResponse

from drive_storage.auth import DriveAuthenticator, ServiceAccountKey
from drive_storage.config import Settings, get_settings
from drive_storage.errors import DeleteError, ReadError, UploadError
from drive_storage.storage.base import ReadOptions, ServeHandler, StorageAdapter, UploadedFile
from drive_storage.storage.drive_client import DriveClient
from drive_storage.storage.paths import compose_reference, remote_id_from_path

logger = logging.getLogger(__name__)

CACHE_MAX_AGE = 14 * 24 * 60 * 60  # 14 days
CACHE_CONTROL = f"public, max-age={CACHE_MAX_AGE}"
CHUNK_SIZE = 64 * 1024


class GoogleDriveStorage(StorageAdapter):
    """Storage adapter that keeps every file in Google Drive."""

    def __init__(
        self,
        key: ServiceAccountKey,
        request_timeout: int | None = None,
        reuse_token: bool = False,
        authenticator: DriveAuthenticator | None = None,
        client_factory: Callable[..., DriveClient] = DriveClient,
    ) -> None:
        self.key = key
        self._authenticator = authenticator or DriveAuthenticator(key, reuse_token=reuse_token)
        self._client_factory = client_factory
        self._timeout = request_timeout

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "GoogleDriveStorage":
        settings = settings or get_settings()
        return cls(
            ServiceAccountKey.from_settings(settings),
            request_timeout=settings.drive_request_timeout,
            reuse_token=settings.drive_reuse_token,
        )

    def _client(self, session: requests.Session) -> DriveClient:
        return self._client_factory(session, timeout=self._timeout)

    def save(self, file: UploadedFile, target_dir: str | None = None) -> str:
        """Upload ``file`` and make it publicly readable.

        The upload and the permission grant are two separate calls. If the
        grant fails the Drive file is left behind unshared and its id is
        attached to the raised ``UploadError``.

        Raises:
            AuthError: If authentication fails (nothing is uploaded)
            UploadError: If either Drive call fails
        """
        with closing(self._authenticator.authenticate()) as session:
            client = self._client(session)
            try:
                with open(file.path, "rb") as stream:
                    file_id = client.create_file(file.name, file.type, stream)
            except (OSError, requests.RequestException, KeyError, ValueError) as exc:
                logger.error(f"Upload of {file.name} failed: {exc}")
                raise UploadError(f"Upload of {file.name} failed") from exc

            try:
                client.grant_public_read(file_id)
            except requests.RequestException as exc:
                logger.error(f"Sharing Drive file {file_id} failed: {exc}")
                raise UploadError(
                    f"Drive file {file_id} was uploaded but could not be shared",
                    remote_id=file_id,
                ) from exc

        return compose_reference(file_id, file.ext)

    def exists(self, file_name: str, target_dir: str | None = None) -> bool:
        # Stub: never checked against Drive.
        return True

    def serve(self) -> ServeHandler:
        """Return the handler for the host's image route.

        The handler takes the route-relative path (``/abc123.png``) and
        answers with a streaming response. Failures before the first byte
        are raised so the host can turn them into its not-found page.
        """

        def handler(path: str) -> StreamingResponse:
            file_id = remote_id_from_path(path)
            session = self._authenticator.authenticate()
            try:
                media = self._client(session).open_media(file_id)
            except requests.RequestException as exc:
                session.close()
                logger.error(f"Fetching Drive file {file_id} failed: {exc}")
                raise ReadError(f"Drive file {file_id} could not be fetched", remote_id=file_id) from exc

            return StreamingResponse(
                self._forward(file_id, session, media),
                media_type=media.headers.get("Content-Type", "application/octet-stream"),
                headers={"Cache-Control": CACHE_CONTROL},
            )

        return handler

    def _forward(
        self, file_id: str, session: requests.Session, media: requests.Response
    ) -> Iterator[bytes]:
        try:
            for chunk in media.iter_content(chunk_size=CHUNK_SIZE):
                yield chunk
        except requests.RequestException as exc:
            logger.error(f"Streaming Drive file {file_id} failed: {exc}")
            raise ReadError(f"Drive file {file_id} stream broke off", remote_id=file_id) from exc
        else:
            logger.info("Done downloading file.")
        finally:
            # Also runs when the client disconnects and the generator is closed
            media.close()
            session.close()

    def delete(self, options: ReadOptions) -> None:
        file_id = remote_id_from_path(options.path)
        with closing(self._authenticator.authenticate()) as session:
            try:
                self._client(session).delete_file(file_id)
            except requests.RequestException as exc:
                logger.error(f"Deleting Drive file {file_id} failed: {exc}")
                raise DeleteError(f"Drive file {file_id} could not be deleted", remote_id=file_id) from exc

    def read(self, options: ReadOptions) -> bytes:
        """Download a stored file completely into memory."""
        file_id = remote_id_from_path(options.path)
        chunks: list[bytes] = []
        with closing(self._authenticator.authenticate()) as session:
            try:
                with closing(self._client(session).open_media(file_id)) as media:
                    for chunk in media.iter_content(chunk_size=CHUNK_SIZE):
                        chunks.append(chunk)
            except requests.RequestException as exc:
                logger.error(f"Reading Drive file {file_id} failed: {exc}")
                raise ReadError(f"Drive file {file_id} could not be read", remote_id=file_id) from exc

        return b"".join(chunks)
