"""Manual operations against the Drive storage backend.

Usage:
    python -m scripts.drive_storage_cli upload ./photo.png
    python -m scripts.drive_storage_cli read /content/images/<id>.png --output photo.png
    python -m scripts.drive_storage_cli delete /content/images/<id>.png
    python -m scripts.drive_storage_cli serve --port 2368

Credentials come from DRIVE_KEY_FILE or DRIVE_CLIENT_EMAIL/DRIVE_PRIVATE_KEY.
"""

from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Sequence

import uvicorn

from drive_storage.errors import StorageError
from drive_storage.storage import GoogleDriveStorage, ReadOptions, StorageAdapter, UploadedFile
from drive_storage.web import create_app

LOGGER = logging.getLogger(__name__)


def build_storage() -> StorageAdapter:
    return GoogleDriveStorage.from_settings()


def upload(storage: StorageAdapter, path: Path, name: str | None, mime_type: str | None) -> str:
    guessed, _ = mimetypes.guess_type(path.name)
    file = UploadedFile(
        path=str(path),
        name=name or path.name,
        type=mime_type or guessed or "application/octet-stream",
        ext=path.suffix,
    )
    reference = storage.save(file)
    LOGGER.info("Uploaded %s as %s", path, reference)
    return reference


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Upload, read, delete or serve Drive-backed files")
    commands = parser.add_subparsers(dest="command", required=True)

    upload_cmd = commands.add_parser("upload", help="Upload a local file and print its reference")
    upload_cmd.add_argument("path", type=Path)
    upload_cmd.add_argument("--name", help="Display name in Drive (default: file name)")
    upload_cmd.add_argument("--mime-type", help="Declared MIME type (default: guessed)")

    read_cmd = commands.add_parser("read", help="Download a stored file")
    read_cmd.add_argument("reference", help="Stored reference, e.g. /content/images/<id>.png")
    read_cmd.add_argument("--output", type=Path, help="Write here instead of stdout")

    delete_cmd = commands.add_parser("delete", help="Delete a stored file")
    delete_cmd.add_argument("reference")

    serve_cmd = commands.add_parser("serve", help="Run the image route under uvicorn")
    serve_cmd.add_argument("--host", default="127.0.0.1")
    serve_cmd.add_argument("--port", type=int, default=2368)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        storage = build_storage()
        if args.command == "upload":
            print(upload(storage, args.path, args.name, args.mime_type))
        elif args.command == "read":
            data = storage.read(ReadOptions(path=args.reference))
            if args.output:
                args.output.write_bytes(data)
                LOGGER.info("Wrote %d bytes to %s", len(data), args.output)
            else:
                sys.stdout.buffer.write(data)
                sys.stdout.buffer.flush()
        elif args.command == "delete":
            storage.delete(ReadOptions(path=args.reference))
            LOGGER.info("Deleted %s", args.reference)
        elif args.command == "serve":
            uvicorn.run(create_app(storage), host=args.host, port=args.port)
    except StorageError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
