from fastapi import HTTPException, Depends, status
from heritage_admin.models import AdminUser
from heritage_admin.security.auth import require_admin_user

ROLE_RANK = {"moderator": 1, "admin": 2, "superadmin": 3}

def has_role(admin: AdminUser, minimum: str) -> bool:
    return ROLE_RANK.get(admin.role, 0) >= ROLE_RANK[minimum]

def require_role(minimum: str):
    """Dependency factory: the caller's role must rank at or above `minimum`."""
    def dependency(admin: AdminUser = Depends(require_admin_user)) -> AdminUser:
        if not has_role(admin, minimum):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"This action requires the {minimum} role."
            )
        return admin
    return dependency

require_moderator = require_role("moderator")
require_admin = require_role("admin")
require_superadmin = require_role("superadmin")
