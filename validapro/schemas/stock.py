from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class StockUpsert(BaseModel):
    product_id: Optional[int] = None
    expiration_date: Optional[date] = None
    quantity: Optional[int] = None
    store_id: Optional[int] = None


class StockEntryRead(BaseModel):
    id: int
    store_id: int
    product_id: int
    expiration_date: date
    quantity: int
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)


class StockItem(BaseModel):
    stock_id: int
    store_id: int
    product_id: int
    name: str
    ean: str
    expiration_date: date
    quantity: int
    last_updated: Optional[datetime] = None
    days_remaining: int


class StockSummary(BaseModel):
    store_id: int
    total_entries: int
    total_units: int
    low_stock: int
    expiring_soon: int
    expired: int
    low_stock_threshold: int
    expiring_soon_days: int


class StockHistoryRead(BaseModel):
    id: int
    stock_id: Optional[int] = None
    store_id: int
    product_id: int
    changed_by: Optional[int] = None
    old_quantity: Optional[int] = None
    new_quantity: Optional[int] = None
    old_expiration: Optional[date] = None
    new_expiration: Optional[date] = None
    change_type: str
    changed_at: datetime

    model_config = ConfigDict(from_attributes=True)
