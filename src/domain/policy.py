from collections.abc import Sequence
from typing import Any

from src.domain.entities import User
from src.domain.errors import PermissionDeniedError
from src.rules.models import Rules


class PolicyEngine:
    def __init__(self, rules: Rules):
        self.rules = rules

    def check_permission(
        self,
        user: User | None,
        user_roles: Sequence[str],
        action: str,
        resource: Any = None,
    ) -> bool:
        """
        Check if the user/role is allowed to perform the action on the resource.

        Order of precedence:
        1. Public Permissions (Global)
        2. Role-Based Access Control (RBAC)
        3. Ownership (ABAC): owner roles may act on content they authored
        """
        if action in self.rules.rbac.public_permissions:
            return True

        if not user or user.status != "active":
            return False

        for role in user_roles:
            allowed_actions = self.rules.rbac.roles.get(role, [])
            if "*" in allowed_actions or action in allowed_actions:
                return True
            # Scoped wildcards: "content:*" matches "content:edit"
            if ":" in action:
                scope = action.split(":")[0]
                if f"{scope}:*" in allowed_actions:
                    return True

        if resource is not None and action in self.rules.abac.owner_allow:
            if set(user_roles) & set(self.rules.abac.owner_roles):
                owner_id = getattr(resource, "author_id", None)
                if owner_id is not None and str(owner_id) == str(user.id):
                    return True

        return False

    def require(self, user: User | None, action: str, resource: Any = None) -> None:
        roles = user.roles if user else []
        if not self.check_permission(user, roles, action, resource):
            raise PermissionDeniedError(f"Not allowed to {action}")

    def can_manage_users(self, user: User) -> bool:
        return self.check_permission(user, user.roles, "users:manage")
