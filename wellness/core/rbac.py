# wellness/core/rbac.py
from fastapi import Depends, HTTPException, status
from wellness.api.deps import CurrentUser, get_current_user
from wellness.core.errors import NotOwner
from wellness.core.tokens import ROLE_ADMIN

def require_roles(*roles: str):
    allowed = set(roles)
    def dep(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return user
    return dep

def is_admin(user: CurrentUser) -> bool:
    return user.role == ROLE_ADMIN

def ensure_owner_or_admin(user: CurrentUser, owner_id: str) -> None:
    if not is_admin(user) and user.id != str(owner_id):
        raise NotOwner()
