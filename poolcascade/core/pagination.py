from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any


def clamp_page(
    page: int | None,
    page_size: int | None,
    *,
    default_size: int = 10,
    max_size: int = 100,
) -> tuple[int, int]:
    """Out-of-range values fall back to defaults instead of erroring."""
    page = page if page and page > 0 else 1
    if not page_size or page_size <= 0 or page_size > max_size:
        page_size = default_size
    return page, page_size


def pagination_meta(page: int, page_size: int, total: int) -> dict[str, Any]:
    total_pages = max(1, math.ceil(total / page_size))
    return {
        "current_page": page,
        "page_size": page_size,
        "total_pages": total_pages,
        "total_count": total,
        "has_next": page < total_pages,
        "has_prev": page > 1,
    }


def paginate(items: Sequence[Any], page: int, page_size: int) -> tuple[list[Any], dict[str, Any]]:
    offset = (page - 1) * page_size
    return list(items[offset:offset + page_size]), pagination_meta(page, page_size, len(items))
