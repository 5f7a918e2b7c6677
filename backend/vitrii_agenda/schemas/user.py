"""Pydantic schemas for Users."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    name: str = Field(alias="nome", min_length=1, max_length=150)
    email: Optional[str] = None

    model_config = {"populate_by_name": True}


class UserOut(BaseModel):
    user_id: int = Field(serialization_alias="id")
    name: str = Field(serialization_alias="nome")
    email: Optional[str] = None
    created_at: Optional[datetime] = Field(None, serialization_alias="dataCriacao")

    model_config = {"from_attributes": True}
