from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.sqlite.repos import SQLiteMetaRepo, SQLiteUserRepo
from src.api.deps import (
    get_auth_adapter,
    get_clock,
    get_current_user,
    get_rules,
    get_user_meta_repo,
    get_user_repo,
)
from src.api.errors import STATUS_BY_CODE
from src.api.schemas import (
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserResponse,
)
from src.components.auth import (
    AuthOutput,
    LoginInput,
    LogoutInput,
    RefreshInput,
    RegisterInput,
    run_login,
    run_logout,
    run_refresh,
    run_register,
)
from src.domain.entities import User
from src.rules.models import Rules

router = APIRouter()


def _set_session_cookies(response: Response, result: AuthOutput, rules: Rules) -> None:
    cookie = rules.auth.cookie
    response.set_cookie(
        key=cookie.access_name,
        value=f"Bearer {result.access_token}",
        httponly=True,
        max_age=rules.auth.access_ttl_minutes * 60,
        samesite=cookie.same_site,  # type: ignore[arg-type]
        secure=cookie.secure,
    )
    response.set_cookie(
        key=cookie.refresh_name,
        value=result.refresh_token or "",
        httponly=True,
        max_age=rules.auth.refresh_ttl_minutes * 60,
        samesite=cookie.same_site,  # type: ignore[arg-type]
        secure=cookie.secure,
        path="/api/auth",
    )


def _session_response(response: Response, result: AuthOutput, rules: Rules) -> TokenResponse:
    if not result.success or result.user is None:
        code = result.error_code or "unauthorized"
        raise HTTPException(
            status_code=STATUS_BY_CODE.get(code, status.HTTP_400_BAD_REQUEST),
            detail={"error": code, "message": result.error, "errors": []},
            headers={"WWW-Authenticate": "Bearer"} if code != "conflict" else None,
        )
    _set_session_cookies(response, result, rules)
    return TokenResponse(
        access_token=result.access_token or "",
        refresh_token=result.refresh_token or "",
        user=UserResponse.from_user(result.user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    req: RegisterRequest,
    response: Response,
    rules: Rules = Depends(get_rules),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    user_meta: SQLiteMetaRepo = Depends(get_user_meta_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    clock: SystemClock = Depends(get_clock),
) -> TokenResponse:
    """Create an account with the default role and start a session."""
    inp = RegisterInput(
        login=req.login, email=req.email, password=req.password, display_name=req.display_name
    )
    result = run_register(
        inp,
        user_repo,
        user_meta,
        auth_adapter,
        clock,
        default_role=rules.auth.default_role,
        password_min_length=rules.auth.password_min_length,
    )
    return _session_response(response, result, rules)


@router.post("/login", response_model=TokenResponse)
def login(
    req: LoginRequest,
    response: Response,
    rules: Rules = Depends(get_rules),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    user_meta: SQLiteMetaRepo = Depends(get_user_meta_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    clock: SystemClock = Depends(get_clock),
) -> TokenResponse:
    """Authenticate by login or email; sets HttpOnly session cookies."""
    result = run_login(
        LoginInput(identifier=req.identifier, password=req.password),
        user_repo,
        user_meta,
        auth_adapter,
        clock,
    )
    return _session_response(response, result, rules)


@router.post("/refresh", response_model=TokenResponse)
def refresh(
    request: Request,
    response: Response,
    req: RefreshRequest | None = None,
    rules: Rules = Depends(get_rules),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    user_meta: SQLiteMetaRepo = Depends(get_user_meta_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    clock: SystemClock = Depends(get_clock),
) -> TokenResponse:
    """Exchange a refresh token for a new pair; the old refresh token stops working."""
    token = (req.refresh_token if req else None) or request.cookies.get(
        rules.auth.cookie.refresh_name
    )
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"error": "invalid_token", "message": "Missing refresh token", "errors": []},
        )
    result = run_refresh(RefreshInput(refresh_token=token), user_repo, user_meta, auth_adapter, clock)
    return _session_response(response, result, rules)


@router.post("/logout")
def logout(
    response: Response,
    current_user: User = Depends(get_current_user),
    rules: Rules = Depends(get_rules),
    user_meta: SQLiteMetaRepo = Depends(get_user_meta_repo),
) -> dict[str, str]:
    """Revoke every refresh token of the user and clear the cookies."""
    run_logout(LogoutInput(user_id=current_user.id), user_meta)
    response.delete_cookie(key=rules.auth.cookie.access_name)
    response.delete_cookie(key=rules.auth.cookie.refresh_name, path="/api/auth")
    return {"status": "success"}


@router.get("/me", response_model=UserResponse)
def read_users_me(
    current_user: User = Depends(get_current_user),
) -> UserResponse:
    """Get current user info."""
    return UserResponse.from_user(current_user)
