"""Abstract base classes and helpers for storage adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable

from fastapi.responses import StreamingResponse


@dataclass(frozen=True)
class UploadedFile:
    """File handed over by the host for persistence."""

    path: str
    name: str
    type: str
    ext: str


@dataclass(frozen=True)
class ReadOptions:
    """Locator passed back by the host for delete/read."""

    path: str


ServeHandler = Callable[[str], StreamingResponse]


class StorageAdapter(ABC):
    """Define the storage contract the host application calls into."""

    @abstractmethod
    def save(self, file: UploadedFile, target_dir: str | None = None) -> str:
        """Persist an uploaded file and return the reference the host stores."""

    @abstractmethod
    def exists(self, file_name: str, target_dir: str | None = None) -> bool:
        """Return True if a file with that name is already stored."""

    @abstractmethod
    def serve(self) -> ServeHandler:
        """Return a handler that streams stored files for the serve route."""

    @abstractmethod
    def delete(self, options: ReadOptions) -> None:
        """Remove a stored file."""

    @abstractmethod
    def read(self, options: ReadOptions) -> bytes:
        """Return the raw bytes of a stored file."""
