"""
Page/offset arithmetic for list endpoints.

Clients send ``page`` (1-based) and ``per_page``.  ``per_page`` may be
the literal ``all`` to disable paging, in which case ``per_page`` and
``limit`` are ``0`` and stores must treat a zero limit as "no limit".
Unparseable or non-positive values fall back to the defaults instead
of failing the request.
"""

from dataclasses import dataclass
from typing import Optional

PER_PAGE_ALL = "all"


@dataclass(frozen=True)
class Pagination:
    page: int
    per_page: int
    offset: int
    limit: int


def _to_int(value: Optional[str]) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


def get_pagination(
    page: Optional[str] = None,
    per_page: Optional[str] = None,
    default_per_page: int = 20,
) -> Pagination:
    """Build a ``Pagination`` from raw query-string values."""
    size = default_per_page
    if per_page is not None and per_page.strip().lower() == PER_PAGE_ALL:
        size = 0
    else:
        requested = _to_int(per_page)
        if requested > 0:
            size = requested

    index = max(_to_int(page), 1) - 1
    return Pagination(page=index + 1, per_page=size, offset=index * size, limit=size)
