from datetime import datetime, timedelta
from typing import Any

from src.api.auth_utils import (
    AUDIENCE,
    ISSUER,
    create_access_token,
    create_refresh_token,
    decode_access_token,
    decode_refresh_token,
    get_password_hash,
    verify_password,
)
from src.domain.entities import User


class JWTAuthAdapter:
    """Auth adapter that uses JWT tokens (python-jose) and passlib for password hashing."""

    def __init__(
        self,
        access_ttl_minutes: int = 15,
        refresh_ttl_minutes: int = 60 * 24 * 30,
        issuer: str = ISSUER,
        audience: str = AUDIENCE,
    ) -> None:
        self.access_ttl = timedelta(minutes=access_ttl_minutes)
        self.refresh_ttl = timedelta(minutes=refresh_ttl_minutes)
        self.issuer = issuer
        self.audience = audience

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def issue_access(self, user: User, now_utc: datetime | None = None) -> str:
        claims = {
            "sub": str(user.id),
            "role": user.roles[0] if user.roles else None,
            "email": user.email,
        }
        return create_access_token(claims, self.access_ttl, now_utc, self.issuer, self.audience)

    def issue_refresh(self, user: User, ver: str, now_utc: datetime | None = None) -> str:
        claims = {"sub": str(user.id), "ver": ver}
        return create_refresh_token(claims, self.refresh_ttl, now_utc, self.issuer, self.audience)

    def decode_access(self, token: str) -> dict[str, Any] | None:
        return decode_access_token(token, self.issuer, self.audience)

    def decode_refresh(self, token: str) -> dict[str, Any] | None:
        return decode_refresh_token(token, self.issuer, self.audience)
