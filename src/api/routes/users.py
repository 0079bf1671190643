from fastapi import APIRouter, Depends, HTTPException

from src.adapters.sqlite.repos import SQLiteUserRepo
from src.api.deps import get_current_user, get_listing_config, get_policy, get_user_repo
from src.api.errors import raise_for_errors
from src.api.schemas import PaginationResponse, UserListResponse, UserResponse
from src.components.auth import ListUsersInput, run_list_users
from src.components.listing import ListingConfig, ListingValidationError
from src.domain.entities import User
from src.domain.policy import PolicyEngine

router = APIRouter()


@router.get("", response_model=UserListResponse)
def list_users(
    q: str | None = None,
    page: str | None = None,
    limit: str | None = None,
    current_user: User = Depends(get_current_user),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    policy: PolicyEngine = Depends(get_policy),
    config: ListingConfig = Depends(get_listing_config),
) -> UserListResponse:
    """Search and page through users (administrators only)."""
    inp = ListUsersInput(actor=current_user, q=q, page=page, limit=limit)
    result = run_list_users(inp, user_repo=user_repo, policy=policy, config=config)

    if result.error_code == "forbidden":
        raise HTTPException(status_code=403, detail=result.error or "Access denied")
    if not result.success or result.pagination is None:
        raise_for_errors(
            [
                ListingValidationError(
                    code=result.error_code or "validation_failed",
                    message=result.error or "Invalid request",
                    field=result.error_field,
                )
            ]
        )

    return UserListResponse(
        items=[UserResponse.from_user(u) for u in result.users],
        pagination=PaginationResponse(**result.pagination.__dict__),
    )
