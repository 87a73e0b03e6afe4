import logging
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from validapro.core.constants import (
    ACTIVITY_STORE_CREATE,
    ACTIVITY_STORE_DELETE,
    ACTIVITY_STORE_UPDATE,
    ROLE_LEADER,
)
from validapro.core.errors import ConstraintViolation, NotFound
from validapro.core.security import hash_password
from validapro.core.validation import is_blank, to_str
from validapro.models.stock import StockEntry
from validapro.models.store import Store
from validapro.models.user import User
from validapro.services.activity_service import record_activity
from validapro.services.stock_service import history_for_removal
from validapro.services.user_service import build_user, get_user_by_username

logger = logging.getLogger(__name__)


def get_store(db: Session, store_id: int) -> Store:
    store = db.get(Store, store_id)
    if store is None:
        raise NotFound(f"Store {store_id} not found")
    return store


def create_store(
    db: Session,
    name,
    leader_username,
    leader_password,
    address=None,
    *,
    actor_id: Optional[int],
) -> Store:
    """Create a store together with its leader account."""
    name = to_str(name, "name")
    address = to_str(address, "address", required=False)
    leader = build_user(leader_username, leader_password, ROLE_LEADER)
    if get_user_by_username(db, leader.username) is not None:
        raise ConstraintViolation(f"Username {leader.username} is already taken")

    try:
        db.add(leader)
        db.flush()
        store = Store(name=name, address=address, leader_id=leader.id)
        db.add(store)
        db.flush()
        leader.store_id = store.id
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(f"Could not create store {name}") from exc

    logger.info("Created store %s (%s) led by %s", store.id, store.name, leader.username)
    record_activity(db, ACTIVITY_STORE_CREATE, f"Created store {name}", actor_id)
    return store


def list_stores(db: Session) -> list[dict]:
    rows = db.execute(
        select(
            Store.id,
            Store.name,
            Store.address,
            Store.created_at,
            User.username.label("leader"),
        )
        .outerjoin(User, User.id == Store.leader_id)
        .order_by(Store.name, Store.id)
    ).mappings().all()
    return [dict(row) for row in rows]


def update_store(
    db: Session,
    store_id: int,
    *,
    name=None,
    address=None,
    leader_username=None,
    leader_password=None,
    actor_id: Optional[int],
) -> Store:
    store = get_store(db, store_id)
    if not is_blank(name):
        store.name = to_str(name, "name")
    if address is not None:
        store.address = to_str(address, "address", required=False)

    leader = None
    if not is_blank(leader_username) or not is_blank(leader_password):
        leader = db.get(User, store.leader_id) if store.leader_id else None
        if leader is None:
            if is_blank(leader_username) or is_blank(leader_password):
                db.rollback()
                raise NotFound(f"Store {store_id} has no leader to update")
            leader = build_user(leader_username, leader_password, ROLE_LEADER, store.id)
            db.add(leader)
        else:
            if not is_blank(leader_username):
                leader.username = to_str(leader_username, "leader_username")
            if not is_blank(leader_password):
                leader.password_hash = hash_password(to_str(leader_password, "leader_password"))

    try:
        if leader is not None and leader.id is None:
            db.flush()
            store.leader_id = leader.id
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(f"Could not update store {store_id}") from exc

    record_activity(db, ACTIVITY_STORE_UPDATE, f"Updated store {store.name}", actor_id)
    return store


def delete_store(db: Session, store_id: int, *, actor_id: Optional[int]) -> None:
    """Delete a store, its users and (by cascade) its stock.

    Each removed stock entry leaves a ``delete`` history row.
    """
    store = get_store(db, store_id)
    name = store.name
    entries = db.execute(
        select(StockEntry.id, StockEntry.quantity, StockEntry.expiration_date, StockEntry.product_id)
        .where(StockEntry.store_id == store_id)
    ).all()
    try:
        for entry in entries:
            db.add(history_for_removal(entry, store_id, entry.product_id, actor_id))
        db.flush()
        store.leader_id = None
        db.flush()
        db.execute(delete(User).where(User.store_id == store_id))
        db.execute(delete(StockEntry).where(StockEntry.store_id == store_id))
        db.execute(delete(Store).where(Store.id == store_id))
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(f"Could not delete store {store_id}") from exc

    logger.info("Deleted store %s (%s) with %d stock entries", store_id, name, len(entries))
    record_activity(db, ACTIVITY_STORE_DELETE, f"Deleted store {name}", actor_id)


__all__ = ["create_store", "delete_store", "get_store", "list_stores", "update_store"]
