from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class StoreCreate(BaseModel):
    name: str = Field(validation_alias=AliasChoices("name", "storeName"))
    address: Optional[str] = None
    leader_username: str = Field(validation_alias=AliasChoices("leader_username", "leaderUsername"))
    leader_password: str = Field(validation_alias=AliasChoices("leader_password", "leaderPassword"))

    model_config = ConfigDict(populate_by_name=True)


class StoreUpdate(BaseModel):
    name: Optional[str] = Field(None, validation_alias=AliasChoices("name", "storeName"))
    address: Optional[str] = None
    leader_username: Optional[str] = Field(
        None, validation_alias=AliasChoices("leader_username", "leaderUsername")
    )
    leader_password: Optional[str] = Field(
        None, validation_alias=AliasChoices("leader_password", "leaderPassword")
    )

    model_config = ConfigDict(populate_by_name=True)


class StoreRead(BaseModel):
    id: int
    name: str
    address: Optional[str] = None
    leader: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
