from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from validapro.core.constants import ROLE_LEADER, STORE_STAFF_ROLES
from validapro.dependencies import CurrentUser, get_db, require_roles, resolve_store_id
from validapro.schemas.user import UserCreate, UserRead
from validapro.services.user_service import create_user, list_users

router = APIRouter(prefix="/leader", tags=["Leader"])

leader_only = require_roles(ROLE_LEADER)


@router.get("/users", response_model=list[UserRead])
def get_store_users(db: Session = Depends(get_db), leader: CurrentUser = Depends(leader_only)):
    return list_users(db, store_id=resolve_store_id(leader, None))


@router.post("/users", response_model=UserRead, status_code=201)
def add_store_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    leader: CurrentUser = Depends(leader_only),
):
    if payload.role not in STORE_STAFF_ROLES:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Leaders may only create promoter or repositor users",
        )
    return create_user(
        db,
        payload.username,
        payload.password,
        payload.role,
        resolve_store_id(leader, None),
        actor_id=leader.id,
    )
