import asyncio
import hashlib
import io
import os
from datetime import datetime, timezone

import pytest
from starlette.datastructures import Headers, UploadFile

from filedrop.exceptions import StorageNameExhaustedError, StorageReadError
from filedrop.services import naming
from filedrop.services.storage_service import StorageService, is_image_filename


def save(storage, content, original_filename=None, mimetype=None):
    return asyncio.run(storage.save_bytes(content, original_filename, mimetype))


def test_storage_directory_is_created_recursively(tmp_path):
    target = tmp_path / "nested" / "uploads"
    StorageService(upload_dir=target)
    assert target.is_dir()


def test_save_bytes_writes_payload(storage):
    stored = save(storage, b"hello world", "greeting.txt", "text/plain")

    assert stored.filename.startswith("file-")
    assert stored.filename.endswith(".txt")
    assert stored.size == 11
    assert stored.mimetype == "text/plain"
    assert os.path.isabs(stored.path)
    with open(stored.path, "rb") as fh:
        assert fh.read() == b"hello world"


def test_missing_mimetype_defaults_to_octet_stream(storage):
    stored = save(storage, b"x", "blob")
    assert stored.mimetype == "application/octet-stream"
    assert "." not in stored.filename


def test_existing_file_is_never_overwritten(storage, monkeypatch):
    monkeypatch.setattr(naming, "_now_ms", lambda: 1700000000000)
    monkeypatch.setattr(naming, "_random_draw", lambda: 5)

    first = save(storage, b"first", "a.txt")
    second = save(storage, b"second", "a.txt")

    assert first.filename == "file-1700000000000-5.txt"
    assert second.filename == "file-1700000000000-5-1.txt"
    assert storage.get_file_path(first.filename).read_bytes() == b"first"
    assert storage.get_file_path(second.filename).read_bytes() == b"second"


def test_content_hash_reupload_gets_its_own_file(upload_dir):
    storage = StorageService(upload_dir=upload_dir, naming_strategy="content-hash")

    first = save(storage, b"same", "a.txt")
    second = save(storage, b"same", "a.txt")

    assert first.filename != second.filename
    assert len(os.listdir(upload_dir)) == 2


def test_name_attempts_are_bounded(upload_dir, monkeypatch):
    monkeypatch.setattr(naming, "_now_ms", lambda: 1)
    monkeypatch.setattr(naming, "_random_draw", lambda: 1)
    storage = StorageService(upload_dir=upload_dir, max_name_attempts=2)

    save(storage, b"a", "a.txt")
    save(storage, b"b", "a.txt")
    with pytest.raises(StorageNameExhaustedError):
        save(storage, b"c", "a.txt")


def test_list_files_empty(storage):
    assert storage.list_files() == []


def test_list_files_metadata(storage):
    stored = save(storage, b"\x89PNG....", "photo.PNG", "image/png")

    [entry] = storage.list_files()

    assert entry.filename == stored.filename
    assert entry.size == 8
    assert entry.url == f"/uploads/{stored.filename}"
    assert entry.is_image is True
    assert entry.mtime.tzinfo is not None
    assert abs((datetime.now(timezone.utc) - entry.mtime).total_seconds()) < 60


def test_list_files_is_sorted_by_filename(storage):
    for name in ("c.txt", "a.txt", "b.txt"):
        storage.get_file_path(name).write_bytes(b"x")

    assert [entry.filename for entry in storage.list_files()] == ["a.txt", "b.txt", "c.txt"]


def test_list_files_reports_size_on_disk(storage):
    stored = save(storage, b"abc", "grow.log")
    with open(stored.path, "ab") as fh:
        fh.write(b"defg")

    [entry] = storage.list_files()
    assert entry.size == 7


def test_list_files_percent_encodes_url(storage):
    storage.get_file_path("file-1-2.my ext").write_bytes(b"x")

    [entry] = storage.list_files()
    assert entry.url == "/uploads/file-1-2.my%20ext"


def test_list_files_missing_directory(storage):
    os.rmdir(storage.upload_dir)

    with pytest.raises(StorageReadError) as exc_info:
        storage.list_files()

    assert exc_info.value.message == "Error reading files"
    assert "No such file or directory" in exc_info.value.error


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("a.jpg", True),
        ("a.JPEG", True),
        ("a.png", True),
        ("a.Gif", True),
        ("a.webp", True),
        ("a.pdf", False),
        ("a.svg", False),
        ("jpg", False),
        ("a", False),
    ],
)
def test_is_image_filename(filename, expected):
    assert is_image_filename(filename) is expected


def make_upload(payload, filename, content_type=None):
    headers = Headers({"content-type": content_type}) if content_type else None
    return UploadFile(file=io.BytesIO(payload), filename=filename, headers=headers)


def test_save_upload_copies_in_chunks(upload_dir):
    storage = StorageService(upload_dir=upload_dir, chunk_size=7)
    payload = bytes(range(256)) * 4

    stored = asyncio.run(storage.save_upload(make_upload(payload, "table.csv", "text/csv")))

    assert stored.size == len(payload)
    assert stored.mimetype == "text/csv"
    assert stored.filename.endswith(".csv")
    assert storage.get_file_path(stored.filename).read_bytes() == payload


def test_save_upload_content_hash_hashes_incrementally(upload_dir):
    storage = StorageService(upload_dir=upload_dir, naming_strategy="content-hash", chunk_size=5)
    payload = b"streamed content that spans several chunks"

    stored = asyncio.run(storage.save_upload(make_upload(payload, "a.txt")))

    assert stored.filename == f"file-{hashlib.sha256(payload).hexdigest()}.txt"
    assert stored.mimetype == "application/octet-stream"
    assert storage.get_file_path(stored.filename).read_bytes() == payload
