import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from validapro.core.aging import days_remaining, is_expiring_soon, is_low_stock
from validapro.core.constants import (
    ACTIVITY_STOCK_UPDATE,
    CHANGE_DELETE,
    CHANGE_INSERT,
    CHANGE_UPDATE,
)
from validapro.core.errors import (
    ConcurrencyConflict,
    ConstraintViolation,
    NotFound,
    ValidaProError,
)
from validapro.core.validation import to_date, to_int, to_non_negative_int
from validapro.models.product import Product
from validapro.models.stock import StockEntry
from validapro.models.stock_history import StockHistory
from validapro.models.store import Store
from validapro.services.activity_service import record_activity

logger = logging.getLogger(__name__)

_CONFLICT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _storage_error(exc: SQLAlchemyError) -> ValidaProError:
    if isinstance(exc, IntegrityError):
        return ConstraintViolation(f"Stock write rejected by storage: {exc.orig}")
    return ConcurrencyConflict(f"Stock write could not be applied: {exc.orig}")


def _lock_pair(db: Session, store_id: int, product_id: int) -> None:
    """Serialize writers of one (store, product) pair until the transaction ends.

    File-backed SQLite already holds the database write lock (BEGIN IMMEDIATE).
    PostgreSQL row locks cannot cover a row that does not exist yet, so an
    advisory lock keyed on the pair is taken instead.
    """
    if db.get_bind().dialect.name == "postgresql":
        db.execute(select(func.pg_advisory_xact_lock(store_id, product_id)))


def _load_current(db: Session, store_id: int, product_id: int):
    return db.execute(
        select(StockEntry.id, StockEntry.quantity, StockEntry.expiration_date)
        .where(StockEntry.store_id == store_id, StockEntry.product_id == product_id)
        .with_for_update()
    ).first()


def _write_stock(db: Session, store_id, product_id, expiration_date, quantity, changed_at):
    dialect_name = db.get_bind().dialect.name
    conflict_insert = _CONFLICT_INSERTS.get(dialect_name)
    values = {
        "store_id": store_id,
        "product_id": product_id,
        "expiration_date": expiration_date,
        "quantity": quantity,
        "last_updated": changed_at,
    }
    if conflict_insert is not None:
        stmt = conflict_insert(StockEntry).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["store_id", "product_id"],
            set_={
                "expiration_date": stmt.excluded.expiration_date,
                "quantity": stmt.excluded.quantity,
                "last_updated": stmt.excluded.last_updated,
            },
        )
        db.execute(stmt)
        return

    # Engines without a conflict clause rely on the row lock taken by _load_current;
    # a concurrent first insert loses on the unique constraint instead.
    result = db.execute(
        update(StockEntry)
        .where(StockEntry.store_id == store_id, StockEntry.product_id == product_id)
        .values(expiration_date=expiration_date, quantity=quantity, last_updated=changed_at)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.add(StockEntry(**values))
        db.flush()


def upsert_stock(
    db: Session,
    store_id,
    product_id,
    expiration_date,
    quantity,
    *,
    actor_id: Optional[int],
) -> StockEntry:
    """Set the quantity and expiration of a product in a store.

    Last write wins: an existing entry is overwritten, not incremented. The
    stock write and its history row are committed together.
    """
    store_id = to_int(store_id, "store_id")
    product_id = to_int(product_id, "product_id")
    expiration_date = to_date(expiration_date, "expiration_date")
    quantity = to_non_negative_int(quantity, "quantity")

    product = db.get(Product, product_id)
    if product is None:
        raise NotFound(f"Product {product_id} not found")
    store = db.get(Store, store_id)
    if store is None:
        raise NotFound(f"Store {store_id} not found")

    changed_at = datetime.now(timezone.utc)
    try:
        _lock_pair(db, store_id, product_id)
        previous = _load_current(db, store_id, product_id)
        _write_stock(db, store_id, product_id, expiration_date, quantity, changed_at)
        stock_id = db.execute(
            select(StockEntry.id).where(
                StockEntry.store_id == store_id,
                StockEntry.product_id == product_id,
            )
        ).scalar_one()
        db.add(
            StockHistory(
                stock_id=stock_id,
                store_id=store_id,
                product_id=product_id,
                changed_by=actor_id,
                old_quantity=previous.quantity if previous else None,
                new_quantity=quantity,
                old_expiration=previous.expiration_date if previous else None,
                new_expiration=expiration_date,
                change_type=CHANGE_UPDATE if previous else CHANGE_INSERT,
                changed_at=changed_at,
            )
        )
        db.commit()
    except (IntegrityError, OperationalError) as exc:
        db.rollback()
        raise _storage_error(exc) from exc

    logger.info(
        "Stock %s for store %s product %s: qty %s exp %s",
        "updated" if previous else "created",
        store_id,
        product_id,
        quantity,
        expiration_date.isoformat(),
        extra={
            "store_id": store_id,
            "product_id": product_id,
            "user_id": actor_id,
            "change_type": CHANGE_UPDATE if previous else CHANGE_INSERT,
        },
    )
    record_activity(
        db,
        ACTIVITY_STOCK_UPDATE,
        f"Set {quantity} units of {product.name or 'unknown product'} in store {store.name}",
        actor_id,
    )
    return db.get(StockEntry, stock_id, populate_existing=True)


def delete_stock(db: Session, store_id, product_id, *, actor_id: Optional[int]) -> None:
    store_id = to_int(store_id, "store_id")
    product_id = to_int(product_id, "product_id")
    try:
        _lock_pair(db, store_id, product_id)
        current = _load_current(db, store_id, product_id)
        if current is None:
            db.rollback()
            raise NotFound(f"No stock for product {product_id} in store {store_id}")
        db.add(history_for_removal(current, store_id, product_id, actor_id))
        db.flush()
        db.execute(delete(StockEntry).where(StockEntry.id == current.id))
        db.commit()
    except (IntegrityError, OperationalError) as exc:
        db.rollback()
        raise _storage_error(exc) from exc
    logger.info(
        "Stock removed for store %s product %s",
        store_id,
        product_id,
        extra={
            "store_id": store_id,
            "product_id": product_id,
            "user_id": actor_id,
            "change_type": CHANGE_DELETE,
        },
    )


def history_for_removal(current, store_id, product_id, actor_id) -> StockHistory:
    return StockHistory(
        stock_id=current.id,
        store_id=store_id,
        product_id=product_id,
        changed_by=actor_id,
        old_quantity=current.quantity,
        new_quantity=None,
        old_expiration=current.expiration_date,
        new_expiration=None,
        change_type=CHANGE_DELETE,
    )


def list_stock(
    db: Session,
    store_id,
    *,
    start_date=None,
    end_date=None,
    min_quantity=None,
    max_quantity=None,
    as_of=None,
) -> list[dict]:
    """Stock of one store with product name, EAN and days remaining.

    Bounds are inclusive. Rows come back by expiration date, then stock id.
    """
    store_id = to_int(store_id, "store_id")
    start_date = to_date(start_date, "start_date", required=False)
    end_date = to_date(end_date, "end_date", required=False)
    min_quantity = to_int(min_quantity, "min_quantity", required=False)
    max_quantity = to_int(max_quantity, "max_quantity", required=False)

    stmt = (
        select(
            StockEntry.id.label("stock_id"),
            StockEntry.store_id,
            StockEntry.product_id,
            Product.name,
            Product.ean,
            StockEntry.expiration_date,
            StockEntry.quantity,
            StockEntry.last_updated,
        )
        .join(Product, Product.id == StockEntry.product_id)
        .where(StockEntry.store_id == store_id)
    )
    if start_date is not None:
        stmt = stmt.where(StockEntry.expiration_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(StockEntry.expiration_date <= end_date)
    if min_quantity is not None:
        stmt = stmt.where(StockEntry.quantity >= min_quantity)
    if max_quantity is not None:
        stmt = stmt.where(StockEntry.quantity <= max_quantity)
    stmt = stmt.order_by(StockEntry.expiration_date.asc(), StockEntry.id.asc())

    items = []
    for row in db.execute(stmt).mappings():
        item = dict(row)
        item["days_remaining"] = days_remaining(row["expiration_date"], as_of)
        items.append(item)
    return items


def summarize_stock(entries, *, low_stock_threshold=15, expiring_soon_days=10) -> dict:
    summary = {
        "total_entries": 0,
        "total_units": 0,
        "low_stock": 0,
        "expiring_soon": 0,
        "expired": 0,
    }
    for entry in entries:
        summary["total_entries"] += 1
        summary["total_units"] += entry["quantity"]
        if is_low_stock(entry["quantity"], low_stock_threshold):
            summary["low_stock"] += 1
        if is_expiring_soon(entry["days_remaining"], expiring_soon_days):
            summary["expiring_soon"] += 1
        if entry["days_remaining"] < 0:
            summary["expired"] += 1
    return summary


def load_stock_history(db: Session, store_id, product_id=None, limit: int = 100) -> list[StockHistory]:
    store_id = to_int(store_id, "store_id")
    stmt = select(StockHistory).where(StockHistory.store_id == store_id)
    if product_id is not None:
        stmt = stmt.where(StockHistory.product_id == to_int(product_id, "product_id"))
    stmt = stmt.order_by(StockHistory.changed_at.desc(), StockHistory.id.desc()).limit(limit)
    return list(db.execute(stmt).scalars().all())


__all__ = [
    "delete_stock",
    "history_for_removal",
    "list_stock",
    "load_stock_history",
    "summarize_stock",
    "upsert_stock",
]
