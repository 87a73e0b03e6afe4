import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from validapro.config import Settings, get_settings
from validapro.core.errors import ValidaProError
from validapro.core.logging import setup_logging
from validapro.database import init_db, session_scope
from validapro.routers import (
    activity_router,
    admin_router,
    auth_router,
    health_router,
    leader_router,
    products_router,
    stock_router,
)
from validapro.services.user_service import ensure_default_admin

setup_logging()
settings: Settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    init_db()
    with session_scope() as db:
        ensure_default_admin(db)
    logger.info("%s started (%s)", settings.APP_NAME, settings.ENVIRONMENT)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidaProError)
async def handle_domain_error(_request: Request, exc: ValidaProError):
    if exc.status_code >= 500:
        logger.error("Unhandled %s: %s", exc.kind, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(health_router)
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(leader_router)
app.include_router(products_router)
app.include_router(stock_router)
app.include_router(activity_router)


__all__ = ["app"]
