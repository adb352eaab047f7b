"""
Role checks for the API.
Admin manages users, catalog, reports and exports; Pharmacists run the counter
(sales, purchases, inventory).
"""
from fastapi import Depends

from pharmacy.api.deps import get_current_user
from pharmacy.core.exceptions import BusinessError
from pharmacy.models.user import Role, User


def require_roles(*roles: Role):
    """Dependency factory: the current user must hold one of `roles`."""
    allowed = {r.value for r in roles}

    def checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise BusinessError.forbidden(
                f"user {current_user.email} ({current_user.role}) needs one of {sorted(allowed)}"
            )
        return current_user

    return checker


admin_only = require_roles(Role.ADMIN)
staff = require_roles(Role.ADMIN, Role.PHARMACIST)
