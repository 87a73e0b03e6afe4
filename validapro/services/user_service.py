import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from validapro.config import get_settings
from validapro.core.constants import ACTIVITY_USER_CREATE, ROLE_ADMIN, ROLES
from validapro.core.errors import ConstraintViolation, NotFound, ValidationError
from validapro.core.security import hash_password, verify_password
from validapro.core.validation import to_str
from validapro.models.store import Store
from validapro.models.user import User
from validapro.services.activity_service import record_activity

logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.execute(select(User).where(User.username == username)).scalars().first()


def authenticate(db: Session, username: str, password: str) -> Optional[User]:
    if not username or not password:
        return None
    user = get_user_by_username(db, username.strip())
    if user is None:
        return None
    if not verify_password(password, user.password_hash):
        return None
    return user


def build_user(username, password, role, store_id=None) -> User:
    username = to_str(username, "username")
    password = to_str(password, "password")
    if role not in ROLES:
        raise ValidationError(f"role must be one of: {', '.join(ROLES)}")
    return User(
        username=username,
        password_hash=hash_password(password),
        role=role,
        store_id=store_id,
    )


def create_user(
    db: Session,
    username,
    password,
    role,
    store_id: Optional[int] = None,
    *,
    actor_id: Optional[int],
) -> User:
    if store_id is not None and db.get(Store, store_id) is None:
        raise NotFound(f"Store {store_id} not found")
    user = build_user(username, password, role, store_id)
    if get_user_by_username(db, user.username) is not None:
        raise ConstraintViolation(f"Username {user.username} is already taken")
    try:
        db.add(user)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(f"Could not create user {user.username}") from exc

    logger.info("Created %s user %s", user.role, user.username)
    record_activity(
        db,
        ACTIVITY_USER_CREATE,
        f"Created {user.role} user {user.username}",
        actor_id,
    )
    return user


def list_users(db: Session, store_id: Optional[int] = None) -> list[User]:
    stmt = select(User).order_by(User.username)
    if store_id is not None:
        stmt = stmt.where(User.store_id == store_id)
    return list(db.execute(stmt).scalars().all())


def ensure_default_admin(db: Session) -> Optional[User]:
    settings = get_settings()
    if not settings.DEFAULT_ADMIN_PASSWORD:
        return None
    existing = get_user_by_username(db, settings.DEFAULT_ADMIN_USERNAME)
    if existing is not None:
        return None
    admin = build_user(settings.DEFAULT_ADMIN_USERNAME, settings.DEFAULT_ADMIN_PASSWORD, ROLE_ADMIN)
    db.add(admin)
    db.commit()
    logger.warning("Created default admin user %s; change its password.", admin.username)
    return admin


__all__ = [
    "authenticate",
    "build_user",
    "create_user",
    "ensure_default_admin",
    "get_user_by_username",
    "list_users",
]
