from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ActivityRead(BaseModel):
    id: int
    activity_type: str
    description: str
    username: Optional[str] = None
    created_at: datetime
