"""
Blog Backend — File Schemas
=============================

What:  Responses of the /file routes. Uploaded files have no database row;
       everything here is derived from the upload and from `stat`.
"""

from typing import List

from pydantic import Field

from blog_backend.schemas.common import CamelModel


class UploadedFile(CamelModel):
    url: str = Field(description="Public path, /uploads/<name>")
    name: str = Field(description="Generated storage name: <uuid4><ext>")
    original_name: str
    size: int = Field(description="Bytes")
    mimetype: str
    upload_time: str = Field(description="UTC ISO 8601")


class FileEntry(CamelModel):
    name: str
    url: str
    size: int
    mimetype: str = Field(description="Inferred from the extension")
    create_time: str = Field(description="UTC ISO 8601 from the filesystem")


class FileListResponse(CamelModel):
    list: List[FileEntry]
    total: int
    page: int
    size: int


class FileDeleted(CamelModel):
    file_name: str
