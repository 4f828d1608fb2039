"""
Blog Backend — File Storage Service
=====================================

What:  Upload, delete and list files under the upload root.
How:   Validates the client-declared MIME type against an allow-list, streams
       the body to disk in chunks while counting bytes, and stores it under a
       generated `<uuid4><ext>` name. No database rows; size and creation time
       come from `stat`.
Who:   Called by routes/files.py. Stored files are served by the /uploads
       static mount in main.py.

Security Model:
    1. MIME allow-list:  image/jpeg, image/png, application/pdf, application/zip
    2. Size limit:       enforced while streaming, partial file removed on abort
    3. UUID filename:    the stored name never contains client input
    4. Delete by name:   names with path separators or '..' are rejected
"""

import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile

from blog_backend.config import settings
from blog_backend.exceptions import FileStorageError, NotFoundError, ValidationError
from blog_backend.schemas.file import FileDeleted, FileEntry, FileListResponse, UploadedFile
from blog_backend.services.paging import validate_page

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
ALLOWED_MIME_TYPES = (
    "image/jpeg",
    "image/png",
    "application/pdf",
    "application/zip",
)

# Used when listing: the type of a stored file is inferred from its extension
MIME_BY_EXTENSION = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".pdf": "application/pdf",
    ".zip": "application/zip",
    ".rar": "application/x-rar-compressed",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

CHUNK_SIZE = 1024 * 1024  # 1MB

PUBLIC_PREFIX = "/uploads"


def _utc_iso(timestamp: Optional[float] = None) -> str:
    if timestamp is None:
        moment = datetime.now(timezone.utc)
    else:
        moment = datetime.fromtimestamp(timestamp, tz=timezone.utc)
    return moment.isoformat().replace("+00:00", "Z")


def guess_mime_type(file_name: str) -> str:
    return MIME_BY_EXTENSION.get(Path(file_name).suffix.lower(), DEFAULT_MIME_TYPE)


class FileService:
    """
    Manages the upload root.

    Layout:
        uploads/
        ├── 0b6f1c1e-7d0a-4a47-9b55-2d1f0f6b3a10.png
        └── 5e3c9a52-1c3b-4f7e-8f0e-6a2d9b7c4e21.pdf
    """

    def __init__(self, upload_root: Optional[str] = None, max_size: Optional[int] = None):
        """
        Args:
            upload_root: Override the configured upload directory (used in tests).
            max_size:    Override the configured size limit in bytes.
        """
        self.upload_root = Path(upload_root or settings.upload_root).resolve()
        self.max_size = max_size or settings.max_upload_size

    async def ensure_root(self) -> None:
        await aiofiles.os.makedirs(self.upload_root, exist_ok=True)

    def validate_mime_type(self, mime_type: Optional[str]) -> str:
        """Raises ValidationError unless the declared type is allowed."""
        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=(
                    "Unsupported file type, allowed types: "
                    f"{', '.join(ALLOWED_MIME_TYPES)}"
                ),
                field="file",
                context={"mimetype": mime_type},
            )
        return mime_type

    def validate_size(self, size: int) -> None:
        if size > self.max_size:
            max_mb = self.max_size / (1024 * 1024)
            raise ValidationError(
                message=f"File size exceeds the maximum of {max_mb:.0f}MB",
                field="file",
                context={"max_size": self.max_size, "size": size},
            )

    async def store_upload(self, upload: Optional[UploadFile]) -> UploadedFile:
        """
        Validate and persist one uploaded file.

        Validation order:
            1. A file was sent (non-empty filename)
            2. Declared MIME type is allowed
            3. Size, checked while streaming; the partial file is removed
               as soon as the limit is crossed

        Raises:
            ValidationError:  missing file, disallowed type, too large
            FileStorageError: the file could not be written
        """
        if upload is None or not upload.filename:
            raise ValidationError("Please choose a file to upload", field="file")

        mime_type = self.validate_mime_type(upload.content_type)

        # Only the extension of the client's name survives
        extension = Path(upload.filename).suffix.lower()
        stored_name = f"{uuid.uuid4()}{extension}"
        target = self.upload_root / stored_name

        written = 0
        try:
            await self.ensure_root()
            async with aiofiles.open(target, "wb") as out:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if written > self.max_size:
                        break
                    await out.write(chunk)
        except OSError as e:
            logger.error("Failed to store upload at %s: %s", target, str(e))
            await self._remove_quietly(target)
            raise FileStorageError(
                message="Failed to save the uploaded file. Please try again.",
                context={"path": str(target), "os_error": str(e)},
            )

        if written > self.max_size:
            await self._remove_quietly(target)
            self.validate_size(written)

        logger.info(
            "File stored: %s (%d bytes, %s, original=%s)",
            stored_name,
            written,
            mime_type,
            upload.filename,
        )
        return UploadedFile(
            url=f"{PUBLIC_PREFIX}/{stored_name}",
            name=stored_name,
            original_name=upload.filename,
            size=written,
            mimetype=mime_type,
            upload_time=_utc_iso(),
        )

    async def delete_file(self, file_name: Optional[str]) -> FileDeleted:
        """
        Remove a stored file by its name.

        Raises:
            ValidationError:  empty name, or a name that could leave the root
            NotFoundError:    no such file
            FileStorageError: unlink failed
        """
        if not file_name:
            raise ValidationError("File name is required", field="fileName")
        if "/" in file_name or "\\" in file_name or ".." in file_name:
            raise ValidationError(
                "Invalid file name",
                field="fileName",
                context={"file_name": file_name},
            )

        target = self.upload_root / file_name
        if not await aiofiles.os.path.isfile(target):
            raise NotFoundError(resource="file", resource_id=file_name, message="File does not exist")

        try:
            await aiofiles.os.remove(target)
        except OSError as e:
            logger.error("Failed to delete %s: %s", target, str(e))
            raise FileStorageError(
                message="Failed to delete the file",
                context={"path": str(target), "os_error": str(e)},
            )

        logger.info("File deleted: %s", file_name)
        return FileDeleted(file_name=file_name)

    async def list_files(self, page: int = 1, size: int = 10) -> FileListResponse:
        """Regular files in the upload root, sorted by name, one page at a time."""
        validate_page(page, size)

        try:
            names = []
            if await aiofiles.os.path.isdir(self.upload_root):
                for name in sorted(await aiofiles.os.listdir(self.upload_root)):
                    if await aiofiles.os.path.isfile(self.upload_root / name):
                        names.append(name)

            entries = []
            for name in names[(page - 1) * size: page * size]:
                stat = await aiofiles.os.stat(self.upload_root / name)
                entries.append(
                    FileEntry(
                        name=name,
                        url=f"{PUBLIC_PREFIX}/{name}",
                        size=stat.st_size,
                        mimetype=guess_mime_type(name),
                        create_time=_utc_iso(stat.st_ctime),
                    )
                )
        except OSError as e:
            logger.error("Failed to list %s: %s", self.upload_root, str(e))
            raise FileStorageError(
                message="Failed to read the upload directory",
                context={"path": str(self.upload_root), "os_error": str(e)},
            )

        return FileListResponse(list=entries, total=len(names), page=page, size=size)

    async def _remove_quietly(self, path: Path) -> None:
        try:
            if await aiofiles.os.path.exists(path):
                await aiofiles.os.remove(path)
        except OSError as e:
            logger.warning("Failed to clean up partial file %s: %s", path.name, str(e))


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
