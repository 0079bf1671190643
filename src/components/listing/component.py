"""
Listing component - admin/public listing of content entities.

Invariants:
- I1: Soft-deleted entities never appear
- I2: 1 <= page <= max_page and 1 <= limit <= max_limit; the reported page is the requested one
- I3: total_pages = max(1, ceil(total / limit)); pages past the end are empty
- I4: Full-text results are ordered by relevance before the default order
"""

from __future__ import annotations

from src.domain.errors import CmsError
from src.rules.models import ListingRules

from ._impl import ListingService
from .models import ListingConfig, ListingInput, ListingOutput, ListingValidationError
from .ports import ListingRepoPort


def config_from_rules(rules: ListingRules | None) -> ListingConfig:
    if rules is None:
        return ListingConfig()
    return ListingConfig(
        default_limit=rules.default_limit,
        max_limit=rules.max_limit,
        max_page=rules.max_page,
        text_search_min_length=rules.text_search_min_length,
        title_weight=rules.weights.get("title", 10.0),
        slug_weight=rules.weights.get("slug", 6.0),
        excerpt_weight=rules.weights.get("excerpt", 4.0),
    )


def run_list(
    inp: ListingInput,
    *,
    repo: ListingRepoPort,
    config: ListingConfig | None = None,
) -> ListingOutput:
    service = ListingService(repo, config)
    try:
        return service.list(inp.type, inp.status, inp.q, inp.page, inp.limit)
    except CmsError as e:
        return ListingOutput(
            items=[],
            pagination=None,
            errors=[ListingValidationError(code=e.code, message=e.message, field=e.field)],
            success=False,
        )
