from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, Integer, String

from validapro.database.base import Base


class StockHistory(Base):
    """Append-only before/after record of a stock entry mutation.

    Ids are plain copies without foreign keys, so deleting stock or users
    never rewrites a written row.
    """

    __tablename__ = "stock_history"

    id = Column(Integer, primary_key=True)
    stock_id = Column(Integer)
    store_id = Column(Integer, nullable=False)
    product_id = Column(Integer, nullable=False)

    changed_by = Column(Integer)

    old_quantity = Column(Integer)
    new_quantity = Column(Integer)
    old_expiration = Column(Date)
    new_expiration = Column(Date)

    change_type = Column(String(10), nullable=False)
    changed_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        CheckConstraint(
            "change_type IN ('insert', 'update', 'delete')",
            name="ck_stock_history_change_type",
        ),
        Index("idx_history_stock", "stock_id"),
        Index("idx_history_store_product", "store_id", "product_id"),
    )


__all__ = ["StockHistory"]
