"""
Auth component - registration, login and refresh-token rotation.
"""

from .component import (
    REFRESH_VERSION_KEY,
    get_refresh_version,
    issue_refresh_version,
    run_list_users,
    run_login,
    run_logout,
    run_refresh,
    run_register,
    run_verify_access,
)
from .models import (
    AuthOutput,
    ListUsersInput,
    LoginInput,
    LogoutInput,
    RefreshInput,
    RegisterInput,
    UserListOutput,
    VerifyAccessInput,
)
from .ports import AuthAdapterPort, TimePort, UserMetaPort, UserRepoPort

__all__ = [
    # Entry points
    "run_list_users",
    "run_login",
    "run_logout",
    "run_refresh",
    "run_register",
    "run_verify_access",
    # Rotation helpers
    "REFRESH_VERSION_KEY",
    "get_refresh_version",
    "issue_refresh_version",
    # Models
    "AuthOutput",
    "ListUsersInput",
    "LoginInput",
    "LogoutInput",
    "RefreshInput",
    "RegisterInput",
    "UserListOutput",
    "VerifyAccessInput",
    # Ports
    "AuthAdapterPort",
    "TimePort",
    "UserMetaPort",
    "UserRepoPort",
]
