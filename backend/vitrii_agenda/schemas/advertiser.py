"""Pydantic schemas for Advertisers."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AdvertiserCreate(BaseModel):
    name: str = Field(alias="nome", min_length=1, max_length=150)

    model_config = {"populate_by_name": True}


class AdvertiserOut(BaseModel):
    advertiser_id: int = Field(serialization_alias="id")
    name: str = Field(serialization_alias="nome")
    created_at: Optional[datetime] = Field(None, serialization_alias="dataCriacao")
    members: list[AdvertiserMemberOut] = Field(default=[], serialization_alias="membros")

    model_config = {"from_attributes": True}


class AdvertiserMemberAdd(BaseModel):
    user_id: int = Field(alias="usuarioId")

    model_config = {"populate_by_name": True}


class AdvertiserMemberOut(BaseModel):
    user_id: int = Field(serialization_alias="usuarioId")
    linked_at: Optional[datetime] = Field(None, serialization_alias="dataVinculo")

    model_config = {"from_attributes": True}


# Rebuild AdvertiserOut now that AdvertiserMemberOut is defined
AdvertiserOut.model_rebuild()
