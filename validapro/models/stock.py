from datetime import datetime, timezone

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    UniqueConstraint,
)

from validapro.database.base import Base


class StockEntry(Base):
    __tablename__ = "store_stock"

    id = Column(Integer, primary_key=True)

    store_id = Column(Integer, ForeignKey("stores.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False)

    expiration_date = Column(Date, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)

    last_updated = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint("store_id", "product_id", name="uq_store_stock_store_product"),
        CheckConstraint("quantity >= 0", name="ck_store_stock_quantity"),
        Index("idx_stock_store", "store_id"),
        Index("idx_stock_product", "product_id"),
        Index("idx_stock_expiration", "expiration_date"),
    )


__all__ = ["StockEntry"]
