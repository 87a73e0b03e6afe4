from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from validapro.database.base import Base


class Store(Base):
    __tablename__ = "stores"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    address = Column(String)

    leader_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL", use_alter=True, name="fk_stores_leader"),
        unique=True,
    )

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )


__all__ = ["Store"]
