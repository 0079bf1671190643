"""
Listing component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from src.domain.entities import ContentEntity

SearchMode = Literal["none", "substring", "fulltext"]


@dataclass(frozen=True)
class ListingValidationError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class ListingConfig:
    default_limit: int = 20
    max_limit: int = 100
    max_page: int = 10_000
    text_search_min_length: int = 3
    title_weight: float = 10.0
    slug_weight: float = 6.0
    excerpt_weight: float = 4.0


# --- Input Models ---


@dataclass(frozen=True)
class ListingInput:
    """
    Raw listing parameters.

    ``page`` and ``limit`` accept whatever the caller received (query string
    values included). Unparseable values fall back to the defaults, ``limit``
    is capped at ``max_limit`` and a ``page`` above ``max_page`` is rejected.
    """

    type: str
    status: str | None = None  # a status value, "all" or None
    q: str | None = None
    page: Any = 1
    limit: Any = None


# --- Output Models ---


@dataclass(frozen=True)
class Pagination:
    page: int
    limit: int
    total: int
    total_pages: int
    has_prev: bool
    has_next: bool


@dataclass(frozen=True)
class ListingOutput:
    items: list[ContentEntity]
    pagination: Pagination | None
    mode: SearchMode = "none"
    errors: list[ListingValidationError] = field(default_factory=list)
    success: bool = True
