"""Paging arithmetic for user listings."""
import math
from dataclasses import dataclass
from typing import Any

from user_admin.config import settings
from user_admin.domain.users.schemas import PageMeta


@dataclass(frozen=True)
class PageWindow:
    """Normalised paging request: the page asked for and its row window."""

    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def _as_finite(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        # ints beyond float range count as infinite
        return None
    return number if math.isfinite(number) else None


def normalize_page(page: Any) -> int:
    number = _as_finite(page)
    if number is None or number <= 0:
        return 1
    # 0 < page < 1 floors to 0; keep the page 1-based
    return max(1, math.floor(number))


def normalize_limit(
    limit: Any,
    *,
    default: int | None = None,
    maximum: int | None = None,
) -> int:
    default = settings.DEFAULT_PAGE_SIZE if default is None else default
    maximum = settings.MAX_PAGE_SIZE if maximum is None else maximum

    number = _as_finite(limit)
    if number is None:
        return default
    return min(maximum, max(1, math.floor(number)))


def page_window(page: Any, limit: Any) -> PageWindow:
    """
    Normalise raw paging input.

    The returned window keeps the requested page even when it lies past
    the last page; only the reported metadata is clamped (see
    :func:`build_meta`).
    """
    return PageWindow(page=normalize_page(page), limit=normalize_limit(limit))


def build_meta(window: PageWindow, total: int) -> PageMeta:
    total_pages = max(1, math.ceil(total / window.limit))
    page = min(window.page, total_pages)

    return PageMeta(
        page=page,
        limit=window.limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
