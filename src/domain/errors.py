"""
Error taxonomy shared by the content core.

Services raise these; component entry points turn them into
``ContentValidationError`` records and the HTTP layer maps ``code`` to a
status code.
"""

from __future__ import annotations

from typing import Any


class CmsError(Exception):
    """Base class for all content-core errors."""

    code = "error"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.message = message
        self.field = field
        super().__init__(message)


class NotFoundError(CmsError):
    code = "not_found"


class InvalidParentError(CmsError):
    code = "invalid_parent"


class SelfParentError(CmsError):
    code = "self_parent"


class CyclicParentError(CmsError):
    code = "cyclic"


class ValidationFailedError(CmsError):
    """
    Input rejected before anything was written.

    ``issues`` lists every failing field as ``(field, message)`` pairs; the
    first one also populates ``message`` and ``field``.
    """

    code = "validation_failed"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        issues: list[tuple[str | None, str]] | None = None,
    ) -> None:
        super().__init__(message, field)
        self.issues = issues or [(field, message)]


class ConflictError(CmsError):
    code = "conflict"


class RevisionWriteError(CmsError):
    """
    The entity write committed but its revision could not be recorded.

    ``entity`` is the committed state; the missing revision has to be
    reconciled, the entity change stays.
    """

    code = "revision_gap"

    def __init__(self, message: str, entity: Any, cause: Exception | None = None) -> None:
        super().__init__(message)
        self.entity = entity
        self.cause = cause


class AuthError(CmsError):
    code = "unauthorized"


class PermissionDeniedError(CmsError):
    code = "forbidden"
