from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from validapro.config import get_settings
from validapro.core.constants import ROLE_ADMIN, ROLE_LEADER, ROLES
from validapro.dependencies import CurrentUser, get_db, require_roles, resolve_store_id
from validapro.schemas.stock import (
    StockEntryRead,
    StockHistoryRead,
    StockItem,
    StockSummary,
    StockUpsert,
)
from validapro.services.stock_service import (
    delete_stock,
    list_stock,
    load_stock_history,
    summarize_stock,
    upsert_stock,
)

router = APIRouter(prefix="/stock", tags=["Stock"])

any_role = require_roles(*ROLES)


@router.post("", response_model=StockEntryRead)
def add_or_update_stock(
    payload: StockUpsert,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(any_role),
):
    store_id = resolve_store_id(current_user, payload.store_id)
    return upsert_stock(
        db,
        store_id,
        payload.product_id,
        payload.expiration_date,
        payload.quantity,
        actor_id=current_user.id,
    )


@router.get("", response_model=list[StockItem])
def get_stock(
    store_id: int | None = Query(None, description="Store (admins only)"),
    start_date: date | None = Query(None, description="Earliest expiration date"),
    end_date: date | None = Query(None, description="Latest expiration date"),
    min_quantity: int | None = Query(None, ge=0),
    max_quantity: int | None = Query(None, ge=0),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(any_role),
):
    return list_stock(
        db,
        resolve_store_id(current_user, store_id),
        start_date=start_date,
        end_date=end_date,
        min_quantity=min_quantity,
        max_quantity=max_quantity,
    )


@router.get("/summary", response_model=StockSummary)
def get_stock_summary(
    store_id: int | None = Query(None, description="Store (admins only)"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(any_role),
):
    settings = get_settings()
    resolved_store_id = resolve_store_id(current_user, store_id)
    summary = summarize_stock(
        list_stock(db, resolved_store_id),
        low_stock_threshold=settings.LOW_STOCK_THRESHOLD,
        expiring_soon_days=settings.EXPIRING_SOON_DAYS,
    )
    return StockSummary(
        store_id=resolved_store_id,
        low_stock_threshold=settings.LOW_STOCK_THRESHOLD,
        expiring_soon_days=settings.EXPIRING_SOON_DAYS,
        **summary,
    )


@router.get("/history", response_model=list[StockHistoryRead])
def get_stock_history(
    store_id: int | None = Query(None, description="Store (admins only)"),
    product_id: int | None = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(any_role),
):
    return load_stock_history(
        db,
        resolve_store_id(current_user, store_id),
        product_id=product_id,
        limit=limit,
    )


@router.delete("/{product_id}", status_code=204)
def remove_stock(
    product_id: int,
    store_id: int | None = Query(None, description="Store (admins only)"),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_roles(ROLE_ADMIN, ROLE_LEADER)),
):
    delete_stock(db, resolve_store_id(current_user, store_id), product_id, actor_id=current_user.id)
