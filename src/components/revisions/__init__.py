"""
Revisions component - append-only revision history of content entities.
"""

from ._impl import RevisionLog
from .component import run_find_gaps, run_get, run_history
from .models import (
    GapReportOutput,
    GetRevisionInput,
    HistoryInput,
    RevisionListOutput,
    RevisionOutput,
    RevisionValidationError,
)
from .ports import RevisionRepoPort, TimePort

__all__ = [
    # Entry points
    "run_find_gaps",
    "run_get",
    "run_history",
    # Service
    "RevisionLog",
    # Models
    "GapReportOutput",
    "GetRevisionInput",
    "HistoryInput",
    "RevisionListOutput",
    "RevisionOutput",
    "RevisionValidationError",
    # Ports
    "RevisionRepoPort",
    "TimePort",
]
