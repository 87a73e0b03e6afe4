from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String

from validapro.database.base import Base


class ActivityLogEntry(Base):
    __tablename__ = "activity_log"

    id = Column(Integer, primary_key=True)
    activity_type = Column(String(30), nullable=False)
    description = Column(String, nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"))

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("idx_activity_created", "created_at"),
    )


__all__ = ["ActivityLogEntry"]
