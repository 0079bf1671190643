"""
Listing component - filtered, paginated and searchable content listings.
"""

from ._impl import ListingService, build_match_query, clamp_paging, paginate, to_pos_int
from .component import config_from_rules, run_list
from .models import (
    ListingConfig,
    ListingInput,
    ListingOutput,
    ListingValidationError,
    Pagination,
    SearchMode,
)
from .ports import ListingRepoPort

__all__ = [
    "run_list",
    "config_from_rules",
    "ListingService",
    "build_match_query",
    "clamp_paging",
    "paginate",
    "to_pos_int",
    "ListingConfig",
    "ListingInput",
    "ListingOutput",
    "ListingValidationError",
    "Pagination",
    "SearchMode",
    "ListingRepoPort",
]
