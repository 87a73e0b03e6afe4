from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from validapro.core.constants import ROLE_ADMIN
from validapro.core.security import decode_access_token, get_bearer_token
from validapro.database.session import get_db
from validapro.models.user import User


@dataclass
class CurrentUser:
    id: int
    username: str
    role: str
    store_id: Optional[int]

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> CurrentUser:
    token = get_bearer_token(authorization)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token not provided")
    try:
        payload = decode_access_token(token)
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError) as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    # Role and store come from the user row so reassignments apply immediately.
    user = db.get(User, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return CurrentUser(id=user.id, username=user.username, role=user.role, store_id=user.store_id)


def require_roles(*roles: str):
    def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        return current_user

    return dependency


def resolve_store_id(current_user: CurrentUser, requested_store_id: Optional[int]) -> int:
    """Admins pick a store explicitly; everyone else works on their own."""
    if current_user.is_admin:
        if requested_store_id is None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="store_id is required")
        return requested_store_id
    if current_user.store_id is None:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User is not assigned to a store")
    return current_user.store_id


__all__ = ["CurrentUser", "get_current_user", "get_db", "require_roles", "resolve_store_id"]
