"""
Page window + response envelope for list endpoints.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .query import INT32_MAX, parse_int

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps OFFSET well inside BIGINT.
MAX_PAGE = INT32_MAX


@dataclass(frozen=True)
class PageWindow:
    page: int
    page_size: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class PaginatedResponse(BaseModel):
    page: int
    page_size: int
    total: int
    total_pages: int
    data: list[Any]


def window_of(raw_params: Mapping[str, str]) -> PageWindow:
    page = parse_int(raw_params.get("page"))
    if page is None or page <= 0:
        page = DEFAULT_PAGE
    elif page > MAX_PAGE:
        page = MAX_PAGE

    page_size = parse_int(raw_params.get("page_size"))
    if page_size is None or page_size <= 0:
        page_size = DEFAULT_PAGE_SIZE
    elif page_size > MAX_PAGE_SIZE:
        page_size = MAX_PAGE_SIZE

    return PageWindow(page=page, page_size=page_size)


def total_pages(total: int, page_size: int) -> int:
    if total <= 0:
        return 0
    return -(-total // page_size)


def envelope(window: PageWindow, total: int, data: Sequence[Any]) -> PaginatedResponse:
    """
    Wrap one page of rows. Echoes the effective (clamped) page and page size.
    """
    return PaginatedResponse(
        page=window.page,
        page_size=window.page_size,
        total=int(total),
        total_pages=total_pages(int(total), window.page_size),
        data=list(data),
    )
