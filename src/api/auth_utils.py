import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jwt
from passlib.context import CryptContext

SECRET_KEY = os.environ.get("LAB_SECRET_KEY", "dev-secret-unsafe")
REFRESH_SECRET_KEY = os.environ.get("LAB_REFRESH_SECRET_KEY", f"{SECRET_KEY}-refresh")
ALGORITHM = "HS256"
ISSUER = "block-cms"
AUDIENCE = "block-cms-users"
ACCESS_TOKEN_EXPIRE_MINUTES = 15
REFRESH_TOKEN_EXPIRE_MINUTES = 60 * 24 * 30  # 30 days

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    result: bool = pwd_context.verify(plain_password, hashed_password)
    return result


def get_password_hash(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


def _encode(
    data: dict[str, Any],
    typ: str,
    secret: str,
    expires_delta: timedelta,
    now_utc: datetime | None,
    issuer: str,
    audience: str,
) -> str:
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)
    to_encode.update(
        {
            "typ": typ,
            "iat": current_time,
            "exp": current_time + expires_delta,
            "iss": issuer,
            "aud": audience,
        }
    )
    encoded_jwt: str = jwt.encode(to_encode, secret, algorithm=ALGORITHM)
    return encoded_jwt


def _decode(token: str, typ: str, secret: str, issuer: str, audience: str) -> dict[str, Any] | None:
    try:
        payload = jwt.decode(
            token, secret, algorithms=[ALGORITHM], audience=audience, issuer=issuer
        )
    except jwt.JWTError:
        return None
    if payload.get("typ") != typ:
        return None
    return cast(dict[str, Any], payload)


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
    issuer: str = ISSUER,
    audience: str = AUDIENCE,
) -> str:
    """
    Create a short-lived access JWT.

    Args:
        data: Claims to encode (sub, role, email)
        expires_delta: Optional custom expiration delta
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
    """
    return _encode(
        data,
        "access",
        SECRET_KEY,
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
        now_utc,
        issuer,
        audience,
    )


def create_refresh_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
    issuer: str = ISSUER,
    audience: str = AUDIENCE,
) -> str:
    """Long-lived refresh JWT; ``data`` carries ``sub`` and the rotation ``ver``."""
    return _encode(
        data,
        "refresh",
        REFRESH_SECRET_KEY,
        expires_delta or timedelta(minutes=REFRESH_TOKEN_EXPIRE_MINUTES),
        now_utc,
        issuer,
        audience,
    )


def decode_access_token(
    token: str, issuer: str = ISSUER, audience: str = AUDIENCE
) -> dict[str, Any] | None:
    return _decode(token, "access", SECRET_KEY, issuer, audience)


def decode_refresh_token(
    token: str, issuer: str = ISSUER, audience: str = AUDIENCE
) -> dict[str, Any] | None:
    return _decode(token, "refresh", REFRESH_SECRET_KEY, issuer, audience)
