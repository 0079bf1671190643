"""
Tree component - hierarchy of content entities (materialized ancestor paths).
"""

from ._impl import TreeService, check_parent, compute_ancestors, rebase
from .component import run_breadcrumbs, run_children, run_descendants, run_move
from .models import (
    BreadcrumbsInput,
    BreadcrumbsOutput,
    ChildrenInput,
    ChildrenOutput,
    MoveInput,
    TreeOperationOutput,
    TreeValidationError,
)
from .ports import TimePort, TreeRepoPort

__all__ = [
    # Entry points
    "run_breadcrumbs",
    "run_children",
    "run_descendants",
    "run_move",
    # Service and pure helpers
    "TreeService",
    "check_parent",
    "compute_ancestors",
    "rebase",
    # Models
    "BreadcrumbsInput",
    "BreadcrumbsOutput",
    "ChildrenInput",
    "ChildrenOutput",
    "MoveInput",
    "TreeOperationOutput",
    "TreeValidationError",
    # Ports
    "TimePort",
    "TreeRepoPort",
]
