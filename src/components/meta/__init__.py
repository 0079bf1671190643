"""
Meta component - per-entity key/value metadata.
"""

from ._impl import DEFAULT_MAX_KEY_LENGTH, MetaStore
from .component import run_get, run_list, run_remove, run_set
from .models import (
    GetMetaInput,
    ListMetaInput,
    MetaListOutput,
    MetaOutput,
    MetaValidationError,
    RemoveMetaInput,
    SetMetaInput,
)
from .ports import MetaRepoPort, OwnerLookupPort

__all__ = [
    # Entry points
    "run_get",
    "run_list",
    "run_remove",
    "run_set",
    # Service
    "DEFAULT_MAX_KEY_LENGTH",
    "MetaStore",
    # Models
    "GetMetaInput",
    "ListMetaInput",
    "MetaListOutput",
    "MetaOutput",
    "MetaValidationError",
    "RemoveMetaInput",
    "SetMetaInput",
    # Ports
    "MetaRepoPort",
    "OwnerLookupPort",
]
