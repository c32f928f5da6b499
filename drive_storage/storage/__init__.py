from drive_storage.storage.base import ReadOptions, StorageAdapter, UploadedFile
from drive_storage.storage.google_drive import GoogleDriveStorage

__all__ = ["GoogleDriveStorage", "ReadOptions", "StorageAdapter", "UploadedFile"]
