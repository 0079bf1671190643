"""
Listing component port definitions.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from src.domain.entities import ContentEntity


class ListingRepoPort(Protocol):
    def search(
        self,
        *,
        type: str,
        status: str | None,
        offset: int,
        limit: int,
        fts_query: str | None = None,
        substring: str | None = None,
        weights: Sequence[float] = (10.0, 6.0, 4.0),
    ) -> tuple[list[ContentEntity], int]:
        """
        Return one page of non-deleted entities and the total match count.

        With ``fts_query`` results are ranked by relevance first; the
        remaining order is (status asc, published_at desc, updated_at desc).
        """
        ...
