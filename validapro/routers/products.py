from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from validapro.core.constants import ROLE_ADMIN, ROLE_PROMOTER
from validapro.dependencies import CurrentUser, get_db, require_roles
from validapro.schemas.product import (
    ProductCreate,
    ProductImportRequest,
    ProductImportResult,
    ProductRead,
)
from validapro.services.ingestion_service import decode_upload, import_products_workbook
from validapro.services.product_service import create_product, list_products, search_products

router = APIRouter(prefix="/products", tags=["Products"])

catalog_editor = require_roles(ROLE_ADMIN, ROLE_PROMOTER)


@router.get("", response_model=list[ProductRead])
def get_products(db: Session = Depends(get_db)):
    return list_products(db)


@router.get("/search", response_model=list[ProductRead])
def find_products(
    q: str | None = Query(None, description="EAN or name fragment"),
    db: Session = Depends(get_db),
    _user: CurrentUser = Depends(catalog_editor),
):
    return search_products(db, q)


@router.post("", response_model=ProductRead, status_code=201)
def register_product(
    payload: ProductCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(catalog_editor),
):
    return create_product(
        db,
        payload.name,
        payload.ean,
        payload.category,
        actor_id=current_user.id,
    )


@router.post("/import", response_model=ProductImportResult)
def import_products(
    payload: ProductImportRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(catalog_editor),
):
    content = decode_upload(payload.file)
    return import_products_workbook(
        db,
        content,
        actor_id=current_user.id,
        dry_run=payload.dry_run,
    )
