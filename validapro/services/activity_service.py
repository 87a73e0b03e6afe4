import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from validapro.core.constants import ACTIVITY_TYPES
from validapro.models.activity_log import ActivityLogEntry
from validapro.models.user import User

logger = logging.getLogger(__name__)


def record_activity(
    db: Session,
    activity_type: str,
    description: str,
    actor_id: Optional[int],
) -> Optional[ActivityLogEntry]:
    """Append an activity entry and commit it on its own.

    Call after the primary change has been committed. A failure here is
    logged and rolled back, never raised.
    """
    if activity_type not in ACTIVITY_TYPES:
        logger.error("Unknown activity type %r: %s", activity_type, description)
        return None
    entry = ActivityLogEntry(
        activity_type=activity_type,
        description=description,
        user_id=actor_id,
    )
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to record activity %s: %s", activity_type, description)
        return None
    return entry


def recent_activity(db: Session, limit: int = 10) -> list[dict]:
    rows = db.execute(
        select(
            ActivityLogEntry.id,
            ActivityLogEntry.activity_type,
            ActivityLogEntry.description,
            ActivityLogEntry.created_at,
            User.username,
        )
        .outerjoin(User, User.id == ActivityLogEntry.user_id)
        .order_by(ActivityLogEntry.created_at.desc(), ActivityLogEntry.id.desc())
        .limit(limit)
    ).mappings().all()
    return [dict(row) for row in rows]


__all__ = ["recent_activity", "record_activity"]
