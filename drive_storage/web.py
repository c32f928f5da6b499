"""FastAPI wiring that serves stored images from the adapter.

Mounts the adapter's serve handler on the public image route and maps storage
errors onto plain HTTP answers: a file that cannot be fetched is a 404, any
other storage failure a 502.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, StreamingResponse

from drive_storage.errors import ReadError, StorageError
from drive_storage.storage import GoogleDriveStorage, StorageAdapter
from drive_storage.storage.paths import PUBLIC_PREFIX

logger = logging.getLogger(__name__)


def create_app(storage: StorageAdapter | None = None) -> FastAPI:
    storage = storage or GoogleDriveStorage.from_settings()
    serve_file = storage.serve()

    app = FastAPI(title="Drive Storage", version="0.1.0")

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(PUBLIC_PREFIX + "{file_path:path}")
    def content_image(file_path: str) -> StreamingResponse:
        return serve_file("/" + file_path)

    @app.exception_handler(ReadError)
    async def file_not_found(request: Request, exc: ReadError) -> JSONResponse:
        logger.warning("No servable file at %s: %s", request.url.path, exc)
        return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": "Not Found"})

    @app.exception_handler(StorageError)
    async def storage_failed(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure at %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": "Storage backend unavailable"},
        )

    return app
