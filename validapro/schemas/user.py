from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserCreate(BaseModel):
    username: str
    password: str
    role: str
    store_id: Optional[int] = None


class UserRead(BaseModel):
    id: int
    username: str
    role: str
    store_id: Optional[int] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
