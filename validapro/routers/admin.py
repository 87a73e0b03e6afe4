from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from validapro.core.constants import ROLE_ADMIN
from validapro.dependencies import CurrentUser, get_db, require_roles
from validapro.schemas.store import StoreCreate, StoreRead, StoreUpdate
from validapro.schemas.user import UserCreate, UserRead
from validapro.services.store_service import create_store, delete_store, list_stores, update_store
from validapro.services.user_service import create_user, list_users

router = APIRouter(prefix="/admin", tags=["Admin"])

admin_only = require_roles(ROLE_ADMIN)


@router.get("/stores", response_model=list[StoreRead])
def get_stores(db: Session = Depends(get_db), _admin: CurrentUser = Depends(admin_only)):
    return list_stores(db)


@router.post("/stores", response_model=StoreRead, status_code=201)
def add_store(
    payload: StoreCreate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(admin_only),
):
    store = create_store(
        db,
        payload.name,
        payload.leader_username,
        payload.leader_password,
        payload.address,
        actor_id=admin.id,
    )
    return StoreRead(
        id=store.id,
        name=store.name,
        address=store.address,
        leader=payload.leader_username.strip(),
        created_at=store.created_at,
    )


@router.put("/stores/{store_id}", response_model=StoreRead)
def edit_store(
    store_id: int,
    payload: StoreUpdate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(admin_only),
):
    update_store(
        db,
        store_id,
        name=payload.name,
        address=payload.address,
        leader_username=payload.leader_username,
        leader_password=payload.leader_password,
        actor_id=admin.id,
    )
    return next(row for row in list_stores(db) if row["id"] == store_id)


@router.delete("/stores/{store_id}", status_code=204)
def remove_store(
    store_id: int,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(admin_only),
):
    delete_store(db, store_id, actor_id=admin.id)


@router.get("/users", response_model=list[UserRead])
def get_users(db: Session = Depends(get_db), _admin: CurrentUser = Depends(admin_only)):
    return list_users(db)


@router.post("/users", response_model=UserRead, status_code=201)
def add_user(
    payload: UserCreate,
    db: Session = Depends(get_db),
    admin: CurrentUser = Depends(admin_only),
):
    return create_user(
        db,
        payload.username,
        payload.password,
        payload.role,
        payload.store_id,
        actor_id=admin.id,
    )
