from validapro.routers.activity import router as activity_router
from validapro.routers.admin import router as admin_router
from validapro.routers.auth import router as auth_router
from validapro.routers.health import router as health_router
from validapro.routers.leader import router as leader_router
from validapro.routers.products import router as products_router
from validapro.routers.stock import router as stock_router

__all__ = [
    "activity_router",
    "admin_router",
    "auth_router",
    "health_router",
    "leader_router",
    "products_router",
    "stock_router",
]
