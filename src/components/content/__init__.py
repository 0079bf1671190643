"""
Content component - content entity lifecycle (create, update, move, soft delete).
"""

from ._impl import (
    ContentService,
    get_content,
    get_content_by_slug,
    normalize_slug,
    parse_fields,
    validate_entity,
)
from .component import run_create, run_delete, run_get, run_move, run_update
from .models import (
    NON_NULLABLE_FIELDS,
    UPDATABLE_FIELDS,
    ContentConfig,
    ContentFields,
    ContentOperationOutput,
    ContentOutput,
    ContentValidationError,
    CreateContentInput,
    DeleteContentInput,
    GetContentInput,
    MoveContentInput,
    UpdateContentInput,
)
from .ports import ContentRepoPort, TimePort

__all__ = [
    # Entry points
    "run_create",
    "run_delete",
    "run_get",
    "run_move",
    "run_update",
    # Service and helpers
    "ContentService",
    "get_content",
    "get_content_by_slug",
    "normalize_slug",
    "parse_fields",
    "validate_entity",
    # Models
    "NON_NULLABLE_FIELDS",
    "UPDATABLE_FIELDS",
    "ContentConfig",
    "ContentFields",
    "ContentOperationOutput",
    "ContentOutput",
    "ContentValidationError",
    "CreateContentInput",
    "DeleteContentInput",
    "GetContentInput",
    "MoveContentInput",
    "UpdateContentInput",
    # Ports
    "ContentRepoPort",
    "TimePort",
]
