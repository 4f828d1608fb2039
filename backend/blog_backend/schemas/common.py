"""
Blog Backend — Shared Pydantic Schemas
========================================

What:  Response envelope, error body, and system/health payloads.
How:   Every endpoint answers `{code, message, data}` where `code` mirrors the
       HTTP status. Error responses use the same shape with `data: null`.

JSON field names are camelCase (`createdAt`, `authorId`). CamelModel sets
the alias generator once; request models (RequestModel) also accept
snake_case names and reject fields they do not declare.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

DataT = TypeVar("DataT")


class CamelModel(BaseModel):
    """Base for API models with camelCase JSON names."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class RequestModel(CamelModel):
    """Base for request bodies; undeclared fields are rejected with a 400."""

    model_config = ConfigDict(extra="forbid")


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Success envelope.

    Example:
        {"code": 200, "message": "Blog list retrieved", "data": {...}}
    """
    code: int = Field(description="Mirrors the HTTP status code")
    message: str = Field(description="Human-readable result message")
    data: Optional[DataT] = Field(default=None, description="Payload")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Example:
        {"code": 403, "message": "Insufficient permission: requires VIP User (level 2) or above", "data": null}
    """
    code: int = Field(description="Mirrors the HTTP status code")
    message: str = Field(description="Human-readable error description")
    data: None = Field(default=None)


class SystemInfo(CamelModel):
    """Returned by GET /."""
    name: str
    version: str
    framework: str
    python_version: str
    database: str
    upload_limit: str
    support_file_types: List[str]
    start_time: str


class MemoryUsage(CamelModel):
    rss: str = Field(description="Resident set size, e.g. '52.30MB'")
    vms: str = Field(description="Virtual memory size, e.g. '410.12MB'")


class HealthResponse(CamelModel):
    """Returned by GET /health."""
    status: str = Field(description="healthy or unhealthy")
    database: str = Field(description="Fixed 'connected' placeholder")
    upload_dir: str = Field(description="exists or not exists")
    memory_usage: MemoryUsage
    timestamp: int = Field(description="Milliseconds since the epoch")
