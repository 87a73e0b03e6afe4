from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Index, Integer, String

from validapro.database.base import Base


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    ean = Column(String, nullable=False, unique=True)
    category = Column(String)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint("LENGTH(ean) >= 8", name="ck_products_ean_length"),
        Index("idx_products_name", "name"),
    )


__all__ = ["Product"]
