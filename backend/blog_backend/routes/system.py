"""
Blog Backend — System Routes
==============================

What:  GET / (system information) and GET /health (liveness probe).
How:   Both are public. /health reports the upload directory state and the
       process memory (psutil); it is "healthy" only while the upload root
       exists.
Who:   Called by operators, Docker health checks and load balancers.
"""

import logging
import platform
import time
from datetime import datetime, timezone
from pathlib import Path

import fastapi
import psutil
from fastapi import APIRouter

from blog_backend import __version__
from blog_backend.config import settings
from blog_backend.schemas.common import ApiResponse, HealthResponse, MemoryUsage, SystemInfo
from blog_backend.services.file_service import ALLOWED_MIME_TYPES

logger = logging.getLogger(__name__)

router = APIRouter(tags=["System"])

# Set once when the module loads
_start_time = datetime.now(timezone.utc)


def _megabytes(num_bytes: int) -> str:
    return f"{num_bytes / (1024 * 1024):.2f}MB"


def _database_name(url: str) -> str:
    scheme = url.split(":", 1)[0]
    return scheme.split("+", 1)[0]


@router.get(
    "/",
    response_model=ApiResponse[SystemInfo],
    summary="System information",
)
async def system_info() -> ApiResponse[SystemInfo]:
    info = SystemInfo(
        name="Blog Platform API",
        version=__version__,
        framework=f"FastAPI {fastapi.__version__}",
        python_version=platform.python_version(),
        database=_database_name(settings.database_url),
        upload_limit=f"{settings.max_upload_size_mb:.0f}MB",
        support_file_types=list(ALLOWED_MIME_TYPES),
        start_time=_start_time.isoformat().replace("+00:00", "Z"),
    )
    return ApiResponse(code=200, message="Blog platform API is running", data=info)


@router.get(
    "/health",
    response_model=ApiResponse[HealthResponse],
    summary="Service health check",
)
async def health_check() -> ApiResponse[HealthResponse]:
    """
    Report upload directory state and process memory.

    The database field is a fixed "connected" placeholder; the probe does
    not open a connection.
    """
    upload_dir_exists = Path(settings.upload_root).is_dir()
    if not upload_dir_exists:
        logger.warning("Health check: upload directory %s is missing", settings.upload_root)

    memory = psutil.Process().memory_info()
    health = HealthResponse(
        status="healthy" if upload_dir_exists else "unhealthy",
        database="connected",
        upload_dir="exists" if upload_dir_exists else "not exists",
        memory_usage=MemoryUsage(rss=_megabytes(memory.rss), vms=_megabytes(memory.vms)),
        timestamp=int(time.time() * 1000),
    )
    return ApiResponse(code=200, message="Service health status", data=health)
