from validapro.services.activity_service import recent_activity, record_activity
from validapro.services.ingestion_service import import_products_workbook
from validapro.services.product_service import create_product, list_products, search_products
from validapro.services.stock_service import (
    delete_stock,
    list_stock,
    load_stock_history,
    summarize_stock,
    upsert_stock,
)
from validapro.services.store_service import create_store, delete_store, list_stores, update_store
from validapro.services.user_service import authenticate, create_user, ensure_default_admin, list_users

__all__ = [
    "authenticate",
    "create_product",
    "create_store",
    "create_user",
    "delete_stock",
    "delete_store",
    "ensure_default_admin",
    "import_products_workbook",
    "list_products",
    "list_stock",
    "list_stores",
    "list_users",
    "load_stock_history",
    "recent_activity",
    "record_activity",
    "search_products",
    "summarize_stock",
    "update_store",
    "upsert_stock",
]
