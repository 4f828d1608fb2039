"""
Blog Backend — Paging Bounds
==============================

Shared page/size check for GET /blog and GET /file/list. The upper bounds
keep `(page - 1) * size` inside a 64-bit OFFSET on every backend.
"""

from blog_backend.exceptions import ValidationError

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100


def validate_page(page: int, size: int) -> None:
    if page < 1 or size < 1:
        raise ValidationError(
            "Page and size must be greater than 0",
            context={"page": page, "size": size},
        )
    if page > MAX_PAGE or size > MAX_PAGE_SIZE:
        raise ValidationError(
            f"Page must be at most {MAX_PAGE} and size at most {MAX_PAGE_SIZE}",
            context={"page": page, "size": size},
        )
