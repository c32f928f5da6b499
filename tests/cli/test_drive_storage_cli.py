import pytest

from drive_storage.errors import DeleteError
from drive_storage.storage import StorageAdapter
from scripts import drive_storage_cli


class RecordingStorage(StorageAdapter):
    def __init__(self, delete_error=None):
        self.saved = []
        self.deleted = []
        self.delete_error = delete_error

    def save(self, file, target_dir=None):
        self.saved.append(file)
        return f"/content/images/abc123{file.ext}"

    def exists(self, file_name, target_dir=None):
        return True

    def serve(self):  # pragma: no cover - not used by these commands
        raise NotImplementedError

    def delete(self, options):
        if self.delete_error is not None:
            raise self.delete_error
        self.deleted.append(options.path)

    def read(self, options):
        return b"stored bytes"


@pytest.fixture
def storage(monkeypatch):
    recording = RecordingStorage()
    monkeypatch.setattr(drive_storage_cli, "build_storage", lambda: recording)
    return recording


def test_upload_prints_reference_and_guesses_type(storage, tmp_path, capsys):
    source = tmp_path / "cover.jpg"
    source.write_bytes(b"jpeg")

    assert drive_storage_cli.main(["upload", str(source)]) == 0

    assert capsys.readouterr().out.strip() == "/content/images/abc123.jpg"
    (file,) = storage.saved
    assert (file.name, file.type, file.ext) == ("cover.jpg", "image/jpeg", ".jpg")


def test_upload_honours_overrides(storage, tmp_path):
    source = tmp_path / "blob"
    source.write_bytes(b"?")

    drive_storage_cli.main(["upload", str(source), "--name", "Blob", "--mime-type", "image/webp"])

    (file,) = storage.saved
    assert (file.name, file.type, file.ext) == ("Blob", "image/webp", "")


def test_read_writes_output_file(storage, tmp_path):
    target = tmp_path / "out.png"

    assert drive_storage_cli.main(["read", "/content/images/abc123.png", "--output", str(target)]) == 0

    assert target.read_bytes() == b"stored bytes"


def test_delete_passes_reference(storage):
    assert drive_storage_cli.main(["delete", "/content/images/abc123.png"]) == 0
    assert storage.deleted == ["/content/images/abc123.png"]


def test_storage_error_exits_non_zero(storage, capsys):
    storage.delete_error = DeleteError("Drive file abc123 could not be deleted", remote_id="abc123")

    assert drive_storage_cli.main(["delete", "/content/images/abc123.png"]) == 1
    assert "could not be deleted" in capsys.readouterr().err
