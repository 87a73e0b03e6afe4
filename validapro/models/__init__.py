import importlib

from validapro.models.activity_log import ActivityLogEntry
from validapro.models.product import Product
from validapro.models.stock import StockEntry
from validapro.models.stock_history import StockHistory
from validapro.models.store import Store
from validapro.models.user import User


def import_all_models() -> None:
    for module_name in (
        "validapro.models.activity_log",
        "validapro.models.product",
        "validapro.models.stock",
        "validapro.models.stock_history",
        "validapro.models.store",
        "validapro.models.user",
    ):
        importlib.import_module(module_name)


__all__ = [
    "ActivityLogEntry",
    "Product",
    "StockEntry",
    "StockHistory",
    "Store",
    "User",
    "import_all_models",
]
