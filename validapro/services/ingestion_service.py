import base64
import binascii
import logging
import zipfile
from io import BytesIO
from pathlib import Path
from typing import Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from validapro.core.constants import ACTIVITY_PRODUCT_IMPORT
from validapro.core.errors import ConstraintViolation, ValidationError
from validapro.core.validation import is_blank
from validapro.models.product import Product
from validapro.services.activity_service import record_activity
from validapro.services.product_service import build_product

logger = logging.getLogger(__name__)

_ALIAS_SPECS = (
    (("name",), "name"),
    (("product", "name"), "name"),
    (("product",), "name"),
    (("description",), "name"),
    (("ean",), "ean"),
    (("ean", "13"), "ean"),
    (("barcode",), "ean"),
    (("bar", "code"), "ean"),
    (("gtin",), "ean"),
    (("category",), "category"),
    (("category", "name"), "category"),
)

HEADER_ALIASES = {"".join(parts): target for parts, target in _ALIAS_SPECS}

REQUIRED_COLUMNS = {"name", "ean"}


def normalize_header(value):
    if value is None:
        return ""
    value_text = str(value).strip().lower()
    if not value_text:
        return ""
    for char in (" ", "-", ".", "/"):
        value_text = value_text.replace(char, "_")
    value_text = "_".join(part for part in value_text.split("_") if part)
    alias = HEADER_ALIASES.get(value_text)
    if alias:
        return alias
    alias = HEADER_ALIASES.get(value_text.replace("_", ""))
    if alias:
        return alias
    return value_text


def decode_upload(file_b64: str) -> bytes:
    if is_blank(file_b64):
        raise ValidationError("file is required")
    payload = file_b64.strip()
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("file must be base64 encoded") from exc


def open_workbook(source):
    if isinstance(source, (bytes, bytearray)):
        handle = BytesIO(source)
    else:
        workbook_path = Path(source)
        if not workbook_path.exists():
            raise ValidationError(f"File not found: {workbook_path}")
        if workbook_path.suffix.lower() != ".xlsx":
            raise ValidationError("Only .xlsx files are supported.")
        handle = workbook_path
    try:
        return load_workbook(handle, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as exc:
        raise ValidationError(f"Could not read workbook: {exc}") from exc


def load_sheet_rows(worksheet):
    rows_iter = worksheet.iter_rows(values_only=True)
    headers = next(rows_iter, None)
    if not headers:
        return [], set()
    header_keys = [normalize_header(header) for header in headers]
    indices = [(idx, key) for idx, key in enumerate(header_keys) if key]
    columns = {key for key in header_keys if key}

    rows = []
    for row_number, row in enumerate(rows_iter, start=2):
        if row is None or all(is_blank(value) for value in row):
            continue
        record = {key: row[idx] if idx < len(row) else None for idx, key in indices}
        record["_row"] = row_number
        rows.append(record)
    return rows, columns


def validate_columns(columns):
    missing = sorted(REQUIRED_COLUMNS - columns)
    if missing:
        raise ValidationError("Workbook missing columns: {}".format(", ".join(missing)))


def import_rows(db: Session, rows):
    counts = {"inserted": 0, "skipped": 0, "errors": []}
    known_eans = set(db.execute(select(Product.ean)).scalars().all())
    for row in rows:
        row_number = row.get("_row")
        try:
            product = build_product(row.get("name"), row.get("ean"), row.get("category"))
        except ValidationError as exc:
            counts["skipped"] += 1
            counts["errors"].append({"row": row_number, "error": exc.message})
            continue
        if product.ean in known_eans:
            counts["skipped"] += 1
            counts["errors"].append({"row": row_number, "error": f"EAN {product.ean} already registered"})
            continue
        known_eans.add(product.ean)
        db.add(product)
        counts["inserted"] += 1
    return counts


def import_products_workbook(
    db: Session,
    source,
    *,
    actor_id: Optional[int],
    dry_run: bool = False,
) -> dict:
    """Create catalog products from the first sheet of an ``.xlsx`` workbook.

    ``source`` is a path or the raw workbook bytes. The sheet needs ``name``
    and ``ean`` columns; ``category`` is optional.
    """
    workbook = open_workbook(source)
    try:
        worksheet = workbook[workbook.sheetnames[0]]
        rows, columns = load_sheet_rows(worksheet)
    finally:
        workbook.close()
    validate_columns(columns)
    if not rows:
        raise ValidationError("Workbook has no product rows.")

    try:
        counts = import_rows(db, rows)
        if dry_run:
            db.rollback()
        else:
            db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise ConstraintViolation(f"Product import failed: {exc}") from exc

    logger.info(
        "Product import%s: %d inserted, %d skipped",
        " (dry run)" if dry_run else "",
        counts["inserted"],
        counts["skipped"],
    )
    if not dry_run and counts["inserted"]:
        record_activity(
            db,
            ACTIVITY_PRODUCT_IMPORT,
            f"Imported {counts['inserted']} products from spreadsheet",
            actor_id,
        )
    return counts


__all__ = [
    "decode_upload",
    "import_products_workbook",
    "load_sheet_rows",
    "normalize_header",
    "validate_columns",
]
