from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ProductCreate(BaseModel):
    name: str
    ean: str
    category: Optional[str] = None


class ProductRead(ProductCreate):
    id: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProductImportRequest(BaseModel):
    file: str = Field(description="Base64-encoded .xlsx workbook")
    filename: Optional[str] = None
    dry_run: bool = False


class ProductImportRowError(BaseModel):
    row: Optional[int] = None
    error: str


class ProductImportResult(BaseModel):
    inserted: int
    skipped: int
    errors: List[ProductImportRowError] = Field(default_factory=list)
