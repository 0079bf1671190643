from collections.abc import Sequence
from typing import Any, NoReturn, Protocol

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse

from src.domain.errors import CmsError, ValidationFailedError

STATUS_BY_CODE = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "validation_failed": status.HTTP_400_BAD_REQUEST,
    "invalid_parent": status.HTTP_400_BAD_REQUEST,
    "self_parent": status.HTTP_400_BAD_REQUEST,
    "cyclic": status.HTTP_400_BAD_REQUEST,
    "conflict": status.HTTP_409_CONFLICT,
    "unauthorized": status.HTTP_401_UNAUTHORIZED,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
    "invalid_token": status.HTTP_401_UNAUTHORIZED,
    "token_revoked": status.HTTP_401_UNAUTHORIZED,
    "account_disabled": status.HTTP_403_FORBIDDEN,
    "forbidden": status.HTTP_403_FORBIDDEN,
}


class _ErrorLike(Protocol):
    code: str
    message: str
    field: str | None


def _body(code: str, message: str, errors: list[dict[str, Any]]) -> dict[str, Any]:
    return {"error": code, "message": message, "errors": errors}


def raise_for_errors(errors: Sequence[_ErrorLike]) -> NoReturn:
    """Turn component output errors into an HTTPException; the first one picks the status."""
    first = errors[0]
    raise HTTPException(
        status_code=STATUS_BY_CODE.get(first.code, status.HTTP_400_BAD_REQUEST),
        detail=_body(
            first.code,
            first.message,
            [{"code": e.code, "message": e.message, "field": e.field} for e in errors],
        ),
    )


async def cms_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Errors raised straight from services or the policy engine."""
    assert isinstance(exc, CmsError)
    if isinstance(exc, ValidationFailedError):
        details = [
            {"code": exc.code, "message": message, "field": field} for field, message in exc.issues
        ]
    else:
        details = [{"code": exc.code, "message": exc.message, "field": exc.field}]
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST),
        content={"detail": _body(exc.code, exc.message, details)},
    )
