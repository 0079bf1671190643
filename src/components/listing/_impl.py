"""
ListingService - filtered, paginated listing with two text-search policies.

Queries of ``text_search_min_length`` characters or more go to the full-text
index and are ranked by weighted relevance. Shorter queries fall back to a
case-insensitive substring match (Unicode case folding), since the index
cannot match fragments.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any

from src.domain.entities import CONTENT_STATUSES
from src.domain.errors import ValidationFailedError

from .models import ListingConfig, ListingOutput, Pagination, SearchMode
from .ports import ListingRepoPort

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"\w+", re.UNICODE)


def to_pos_int(value: Any, default: int) -> int:
    """Parse a positive integer, falling back to ``default``."""
    try:
        n = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return n if n >= 1 else default


def build_match_query(q: str) -> str | None:
    """Quote each word and OR them together; None when no word survives."""
    terms = _TOKEN.findall(q)
    if not terms:
        return None
    return " OR ".join(f'"{t}"' for t in terms)


def paginate(total: int, page: int, limit: int) -> Pagination:
    total_pages = max(1, math.ceil(total / limit))
    return Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_prev=page > 1,
        has_next=page < total_pages,
    )


def clamp_paging(page: Any, limit: Any, config: ListingConfig) -> tuple[int, int]:
    """Limit is capped at ``max_limit``; a page beyond ``max_page`` is rejected."""
    page_n = to_pos_int(page, 1)
    if page_n > config.max_page:
        raise ValidationFailedError(f"page must be at most {config.max_page}", field="page")
    return page_n, min(config.max_limit, to_pos_int(limit, config.default_limit))


class ListingService:
    def __init__(self, repo: ListingRepoPort, config: ListingConfig | None = None) -> None:
        self.repo = repo
        self.config = config or ListingConfig()

    def clamp(self, page: Any, limit: Any) -> tuple[int, int]:
        return clamp_paging(page, limit, self.config)

    def list(
        self,
        type: str,
        status: str | None = None,
        q: str | None = None,
        page: Any = 1,
        limit: Any = None,
    ) -> ListingOutput:
        if not type or not type.strip():
            raise ValidationFailedError("type is required", field="type")
        if status in (None, "", "all"):
            status_filter = None
        elif status in CONTENT_STATUSES:
            status_filter = status
        else:
            raise ValidationFailedError(f"Unknown status '{status}'", field="status")

        page_n, limit_n = self.clamp(page, limit)
        offset = (page_n - 1) * limit_n
        text = (q or "").strip()

        mode: SearchMode = "none"
        fts_query = None
        substring = None
        if len(text) >= self.config.text_search_min_length:
            fts_query = build_match_query(text)
        if fts_query is not None:
            mode = "fulltext"
        elif text:
            mode = "substring"
            substring = text.casefold()

        items, total = self.repo.search(
            type=type.strip(),
            status=status_filter,
            offset=offset,
            limit=limit_n,
            fts_query=fts_query,
            substring=substring,
            weights=(
                self.config.title_weight,
                self.config.slug_weight,
                self.config.excerpt_weight,
            ),
        )
        logger.debug(
            "Listed %s (status=%s, mode=%s): %d of %d", type, status_filter, mode, len(items), total
        )
        return ListingOutput(items=items, pagination=paginate(total, page_n, limit_n), mode=mode)
