"""
Test Download System

This module tests archive construction and download including:
- Upload/download round trips
- Entry naming and metadata
- Missing storage root
- Response headers
"""

import io
import re
import stat
import zipfile
import pytest
from pathlib import Path
from fastapi.testclient import TestClient

from logdrop.app import create_app
from logdrop.features.logs.archive import (
    archive_filename,
    build_archive,
    iter_archive,
    list_stored_files,
)
from logdrop.shared.errors import NotFoundError

DISPOSITION = re.compile(r'^attachment; filename="logs_\d{8}_\d{6}\.zip"$')


def _open_archive(response):
    return zipfile.ZipFile(io.BytesIO(response.content))


def test_upload_then_download(test_client, storage_root, stored_files):
    """Test an uploaded file comes back byte-for-byte in the archive"""
    upload = test_client.post(
        "/upload",
        files={"file": ("test.log", b"hello", "text/plain")}
    )
    assert upload.status_code == 200

    response = test_client.get("/download")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert DISPOSITION.match(response.headers["content-disposition"])

    stored = stored_files()[0]
    with _open_archive(response) as zf:
        assert zf.namelist() == [stored.relative_to(storage_root).as_posix()]
        assert zf.read(zf.namelist()[0]) == b"hello"


def test_download_multiple_uploads(test_client, storage_root):
    """Test every uploaded part appears in the archive with its content"""
    payloads = {"a/b.txt": b"nested", "app.log": b"\x00\x01binary", "empty.log": b""}
    for name, content in payloads.items():
        response = test_client.post("/upload", files={"file": (name, content)})
        assert response.status_code == 200

    response = test_client.get("/download")
    assert response.status_code == 200

    with _open_archive(response) as zf:
        received = {
            entry.split("/")[-1].split("_", 1)[1]: zf.read(entry)
            for entry in zf.namelist()
        }
        for entry in zf.namelist():
            assert (storage_root / entry).is_file()

    assert received == {"a_b.txt": b"nested", "app.log": b"\x00\x01binary", "empty.log": b""}


def test_download_missing_root(tmp_path):
    """Test downloading without a storage root yields 404"""
    client = TestClient(create_app(storage_root=tmp_path / "missing"))

    response = client.get("/download")
    assert response.status_code == 404
    assert response.json() == {"error": "No resources could be found."}
    assert str(tmp_path) not in response.text


def test_download_empty_root(test_client):
    """Test an existing but empty root yields an empty archive"""
    response = test_client.get("/download")
    assert response.status_code == 200
    with _open_archive(response) as zf:
        assert zf.namelist() == []


def test_build_archive_entries(tmp_path):
    """Test entry names, compression and permissions"""
    (tmp_path / "2024-01-02").mkdir()
    (tmp_path / "2024-01-01").mkdir()
    (tmp_path / "2024-01-02" / "2_b.log").write_bytes(b"b" * 1000)
    (tmp_path / "2024-01-01" / "1_a.log").write_bytes(b"a")
    (tmp_path / "loose.txt").write_bytes(b"loose")

    archive = build_archive(tmp_path)
    try:
        with zipfile.ZipFile(io.BytesIO(archive.read())) as zf:
            assert zf.namelist() == [
                "loose.txt",
                "2024-01-01/1_a.log",
                "2024-01-02/2_b.log",
            ]
            for info in zf.infolist():
                assert info.compress_type == zipfile.ZIP_DEFLATED
                assert stat.S_IMODE(info.external_attr >> 16) == 0o644
            assert zf.read("2024-01-02/2_b.log") == b"b" * 1000
    finally:
        archive.close()


def test_build_archive_missing_root(tmp_path):
    """Test a missing root raises NotFoundError"""
    with pytest.raises(NotFoundError):
        build_archive(tmp_path / "missing")


def test_build_archive_spills_to_disk(tmp_path):
    """Test archives larger than the spool threshold are still complete"""
    (tmp_path / "big.log").write_bytes(bytes(range(256)) * 64)

    archive = build_archive(tmp_path, spool_bytes=128)
    data = b"".join(iter_archive(archive, chunk_size=100))

    assert archive.closed
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.read("big.log") == bytes(range(256)) * 64


def test_list_stored_files_skips_directories(tmp_path):
    """Test only regular files are listed"""
    (tmp_path / "day").mkdir()
    (tmp_path / "day" / "empty").mkdir()
    (tmp_path / "day" / "1_x.log").write_bytes(b"x")

    assert list_stored_files(tmp_path) == [tmp_path / "day" / "1_x.log"]


def test_archive_filename():
    """Test download names follow logs_<YYYYMMDD_HHMMSS>.zip"""
    from datetime import datetime
    assert archive_filename(datetime(2024, 7, 8, 9, 10, 11)) == "logs_20240708_091011.zip"


def test_download_read_failure(test_client, storage_root, monkeypatch):
    """Test an unreadable stored file fails the whole download with 500"""
    day = storage_root / "2024-01-01"
    day.mkdir()
    (day / "1_app.log").write_bytes(b"secret")

    def failing_read_bytes(self):
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(Path, "read_bytes", failing_read_bytes)

    response = test_client.get("/download")
    assert response.status_code == 500
    assert response.json() == {
        "error": "Something went wrong. Probably not your fault: "
                 "Failed to read file 2024-01-01/1_app.log"
    }
