"""
Blog Backend — File Service Unit Tests
========================================

What:  Tests for FileService validation, storage, deletion and listing.
How:   Each test gets its own FileService rooted in pytest's tmp_path, with
       a small size limit so the oversize path is cheap to exercise.

Test Strategy:
    ✅ Allowed MIME types pass, others are rejected
    ✅ Streaming size limit removes the partial file
    ✅ Stored name is <uuid4><ext> and never contains the client's name
    ✅ Delete rejects traversal names and reports missing files
    ✅ Listing pages sorted names and infers MIME from the extension
"""

import io
import uuid
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from blog_backend.exceptions import NotFoundError, ValidationError
from blog_backend.services.file_service import FileService, guess_mime_type


def make_upload(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestFileValidation:
    """Tests for MIME and size validation."""

    def setup_method(self):
        self.service = FileService(upload_root="/tmp/unused", max_size=1024)

    @pytest.mark.parametrize(
        "mime_type",
        ["image/jpeg", "image/png", "application/pdf", "application/zip"],
    )
    def test_validate_mime_type_allowed(self, mime_type):
        assert self.service.validate_mime_type(mime_type) == mime_type

    @pytest.mark.parametrize("mime_type", ["text/plain", "image/gif", "application/x-msdownload", None])
    def test_validate_mime_type_rejected(self, mime_type):
        """Rejection message lists the allowed types."""
        with pytest.raises(ValidationError, match="image/jpeg, image/png, application/pdf, application/zip"):
            self.service.validate_mime_type(mime_type)

    def test_validate_size_at_limit(self):
        self.service.validate_size(1024)

    def test_validate_size_over_limit(self):
        with pytest.raises(ValidationError, match="exceeds the maximum"):
            self.service.validate_size(1025)

    def test_guess_mime_type_table(self):
        assert guess_mime_type("a.JPG") == "image/jpeg"
        assert guess_mime_type("a.jpeg") == "image/jpeg"
        assert guess_mime_type("a.rar") == "application/x-rar-compressed"
        assert guess_mime_type("a.txt") == "application/octet-stream"
        assert guess_mime_type("noextension") == "application/octet-stream"


class TestFileStorage:
    """Tests for store_upload."""

    @pytest.mark.asyncio
    async def test_store_upload_writes_file(self, tmp_path):
        service = FileService(upload_root=str(tmp_path), max_size=1024)
        upload = make_upload(b"\x89PNG\r\n\x1a\nfake", "My Photo.PNG", "image/png")

        stored = await service.store_upload(upload)

        stem, ext = stored.name[:-4], stored.name[-4:]
        assert ext == ".png"
        uuid.UUID(stem)  # raises if the stored name is not <uuid4><ext>
        assert stored.url == f"/uploads/{stored.name}"
        assert stored.original_name == "My Photo.PNG"
        assert stored.size == 12
        assert stored.mimetype == "image/png"
        assert (tmp_path / stored.name).read_bytes() == b"\x89PNG\r\n\x1a\nfake"

    @pytest.mark.asyncio
    async def test_store_upload_missing_file(self, tmp_path):
        service = FileService(upload_root=str(tmp_path))
        with pytest.raises(ValidationError, match="choose a file"):
            await service.store_upload(None)

    @pytest.mark.asyncio
    async def test_store_upload_disallowed_type_writes_nothing(self, tmp_path):
        service = FileService(upload_root=str(tmp_path))
        upload = make_upload(b"hello", "notes.txt", "text/plain")

        with pytest.raises(ValidationError):
            await service.store_upload(upload)
        assert list(tmp_path.iterdir()) == []

    @pytest.mark.asyncio
    async def test_store_upload_oversize_removes_partial_file(self, tmp_path):
        service = FileService(upload_root=str(tmp_path), max_size=1024)
        upload = make_upload(b"x" * 4096, "big.zip", "application/zip")

        with pytest.raises(ValidationError, match="exceeds the maximum"):
            await service.store_upload(upload)
        assert list(tmp_path.iterdir()) == []


class TestFileDeletion:
    """Tests for delete_file."""

    @pytest.mark.asyncio
    async def test_delete_existing_file(self, tmp_path):
        (tmp_path / "a.png").write_bytes(b"data")
        service = FileService(upload_root=str(tmp_path))

        result = await service.delete_file("a.png")

        assert result.file_name == "a.png"
        assert not (tmp_path / "a.png").exists()

    @pytest.mark.asyncio
    async def test_delete_missing_file(self, tmp_path):
        service = FileService(upload_root=str(tmp_path))
        with pytest.raises(NotFoundError):
            await service.delete_file("missing.png")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["../secret.txt", "sub/a.png", "sub\\a.png", "..", ""])
    async def test_delete_rejects_unsafe_names(self, tmp_path, name):
        service = FileService(upload_root=str(tmp_path))
        with pytest.raises(ValidationError):
            await service.delete_file(name)

    @pytest.mark.asyncio
    async def test_delete_directory_is_not_found(self, tmp_path):
        (tmp_path / "folder").mkdir()
        service = FileService(upload_root=str(tmp_path))
        with pytest.raises(NotFoundError):
            await service.delete_file("folder")


class TestFileListing:
    """Tests for list_files."""

    @pytest.mark.asyncio
    async def test_list_files_paged_and_sorted(self, tmp_path):
        for name in ["c.pdf", "a.png", "b.rar", "d.bin", "e.jpg"]:
            (tmp_path / name).write_bytes(b"12345")
        (tmp_path / "subdir").mkdir()
        service = FileService(upload_root=str(tmp_path))

        first = await service.list_files(page=1, size=2)
        second = await service.list_files(page=2, size=2)
        third = await service.list_files(page=3, size=2)

        assert first.total == 5
        assert [f.name for f in first.list] == ["a.png", "b.rar"]
        assert [f.name for f in second.list] == ["c.pdf", "d.bin"]
        assert [f.name for f in third.list] == ["e.jpg"]
        assert first.list[1].mimetype == "application/x-rar-compressed"
        assert second.list[1].mimetype == "application/octet-stream"
        assert first.list[0].size == 5
        assert first.list[0].url == "/uploads/a.png"

    @pytest.mark.asyncio
    async def test_list_files_missing_root_is_empty(self, tmp_path):
        service = FileService(upload_root=str(Path(tmp_path) / "nope"))
        result = await service.list_files()
        assert result.total == 0
        assert result.list == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("page,size", [(0, 10), (1, 0), (-1, 5)])
    async def test_list_files_invalid_paging(self, tmp_path, page, size):
        service = FileService(upload_root=str(tmp_path))
        with pytest.raises(ValidationError):
            await service.list_files(page=page, size=size)

    @pytest.mark.asyncio
    async def test_list_files_size_above_bound(self, tmp_path):
        service = FileService(upload_root=str(tmp_path))
        with pytest.raises(ValidationError, match="at most"):
            await service.list_files(page=1, size=101)

    @pytest.mark.asyncio
    async def test_list_files_reads_directory_through_aiofiles(self, tmp_path):
        (tmp_path / "b.png").write_bytes(b"12")
        (tmp_path / "a.pdf").write_bytes(b"123")
        service = FileService(upload_root=str(tmp_path))

        with patch("aiofiles.os.listdir", AsyncMock(return_value=["b.png", "a.pdf"])) as listdir:
            result = await service.list_files()

        listdir.assert_awaited_once_with(service.upload_root)
        assert [f.name for f in result.list] == ["a.pdf", "b.png"]
