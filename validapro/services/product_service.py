import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from validapro.core.constants import ACTIVITY_PRODUCT_CREATE, MIN_EAN_LENGTH
from validapro.core.errors import ConstraintViolation, ValidationError
from validapro.core.validation import to_str
from validapro.models.product import Product
from validapro.services.activity_service import record_activity

logger = logging.getLogger(__name__)


def normalize_ean(value) -> str:
    ean = to_str(value, "ean")
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet cells hand numeric barcodes back as floats.
        ean = str(int(value))
    if len(ean) < MIN_EAN_LENGTH:
        raise ValidationError(f"ean must have at least {MIN_EAN_LENGTH} characters")
    return ean


def build_product(name, ean, category=None) -> Product:
    return Product(
        name=to_str(name, "name"),
        ean=normalize_ean(ean),
        category=to_str(category, "category", required=False),
    )


def get_product_by_ean(db: Session, ean: str) -> Optional[Product]:
    return db.execute(select(Product).where(Product.ean == ean)).scalars().first()


def create_product(db: Session, name, ean, category=None, *, actor_id: Optional[int]) -> Product:
    product = build_product(name, ean, category)
    if get_product_by_ean(db, product.ean) is not None:
        raise ConstraintViolation(f"EAN {product.ean} is already registered")
    try:
        db.add(product)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(f"EAN {product.ean} is already registered") from exc

    logger.info("Registered product %s (%s)", product.name, product.ean)
    record_activity(db, ACTIVITY_PRODUCT_CREATE, f"Product {product.name} registered", actor_id)
    return product


def list_products(db: Session) -> list[Product]:
    return list(db.execute(select(Product).order_by(Product.name, Product.id)).scalars().all())


def search_products(db: Session, query: Optional[str]) -> list[Product]:
    text = (query or "").strip()
    if not text:
        return list_products(db)
    pattern = f"%{text}%"
    stmt = (
        select(Product)
        .where(or_(Product.ean.like(pattern), Product.name.ilike(pattern)))
        .order_by(Product.name, Product.id)
    )
    return list(db.execute(stmt).scalars().all())


__all__ = [
    "build_product",
    "create_product",
    "get_product_by_ean",
    "list_products",
    "normalize_ean",
    "search_products",
]
