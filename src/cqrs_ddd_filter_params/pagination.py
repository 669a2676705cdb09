"""Pagination — limit/offset state parsed from and written to URL params."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

MAX_OFFSET = 100_000
DEFAULT_LIMIT = 25
DEFAULT_MAX_LIMIT = 100
DEFAULT_LIMIT_OPTIONS: tuple[int, ...] = (10, 25, 50, 100)


class Pagination(BaseModel):
    """
    Immutable pagination state.

    Transitions return new instances::

        pagination, remaining = pagination_from_params(params)
        pagination = pagination.with_total(127).next_page()
        pagination.page          # 2
        pagination.total_pages   # 6
    """

    model_config = ConfigDict(frozen=True)

    limit: int = Field(default=DEFAULT_LIMIT, gt=0)
    offset: int = Field(default=0, ge=0)
    total_count: int | None = Field(default=None, ge=0)
    limit_options: tuple[int, ...] = DEFAULT_LIMIT_OPTIONS
    max_limit: int = Field(default=DEFAULT_MAX_LIMIT, gt=0)

    @property
    def page(self) -> int:
        """Current page, 1-indexed."""
        return self.offset // self.limit + 1

    @property
    def total_pages(self) -> int | None:
        if self.total_count is None:
            return None
        return math.ceil(self.total_count / self.limit)

    @property
    def has_prev(self) -> bool:
        return self.offset > 0

    @property
    def has_next(self) -> bool:
        """``False`` while the total is unknown."""
        if self.total_count is None:
            return False
        return self.offset + self.limit < self.total_count

    @property
    def start_item(self) -> int:
        return self.offset + 1

    @property
    def end_item(self) -> int:
        end = self.offset + self.limit
        return end if self.total_count is None else min(end, self.total_count)

    def with_total(self, total_count: int) -> Pagination:
        return self.model_copy(update={"total_count": total_count})

    def prev_page(self) -> Pagination:
        return self.model_copy(update={"offset": max(0, self.offset - self.limit)})

    def next_page(self) -> Pagination:
        """Advance one page; callers check :attr:`has_next` first."""
        return self.model_copy(update={"offset": self.offset + self.limit})

    def go_to_page(self, page: int) -> Pagination:
        """
        Jump to *page* (1-indexed).

        The offset is clamped to :data:`MAX_OFFSET` and, when the total is
        known, to the last item.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        offset = min((page - 1) * self.limit, MAX_OFFSET)
        if self.total_count is not None:
            offset = min(offset, max(0, self.total_count - 1))
        return self.model_copy(update={"offset": offset})

    def change_limit(self, limit: int) -> Pagination:
        """New page size (capped at ``max_limit``); returns to page 1."""
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        return self.model_copy(update={"limit": min(limit, self.max_limit), "offset": 0})

    def reset(self) -> Pagination:
        return self.model_copy(update={"offset": 0})


def _int_param(value: Any) -> int | None:
    if isinstance(value, list | tuple):
        value = value[-1] if value else None
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def pagination_from_params(
    params: Mapping[str, Any],
    *,
    default_limit: int = DEFAULT_LIMIT,
    max_limit: int = DEFAULT_MAX_LIMIT,
    limit_options: tuple[int, ...] = DEFAULT_LIMIT_OPTIONS,
    max_offset: int = MAX_OFFSET,
) -> tuple[Pagination, dict[str, Any]]:
    """
    Read ``limit``/``offset`` from *params*.

    Invalid or non-positive limits fall back to *default_limit*; invalid or
    negative offsets to 0. Returns the pagination and the other params.
    """
    limit = _int_param(params.get("limit"))
    if limit is None or limit < 1:
        limit = default_limit
    offset = _int_param(params.get("offset"))
    if offset is None or offset < 0:
        offset = 0
    pagination = Pagination(
        limit=min(limit, max_limit),
        offset=min(offset, max_offset),
        limit_options=tuple(limit_options),
        max_limit=max_limit,
    )
    remaining = {k: v for k, v in params.items() if k not in ("limit", "offset")}
    return pagination, remaining
