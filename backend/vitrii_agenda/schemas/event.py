"""Pydantic schemas for agenda events.

Wire names follow the web client (``titulo``, ``dataInicio``...); Python
attributes follow the ORM.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from vitrii_agenda.models.event import EventStatus, Visibility


class EventCreate(BaseModel):
    advertiser_id: int = Field(alias="anuncianteId")
    title: str = Field(alias="titulo")
    description: Optional[str] = Field(None, alias="descricao")
    start_time: datetime = Field(alias="dataInicio")
    end_time: datetime = Field(alias="dataFim")
    visibility: Optional[str] = Field(None, alias="privacidade")
    color: Optional[str] = Field(None, alias="cor")

    model_config = {"populate_by_name": True}


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, alias="titulo")
    description: Optional[str] = Field(None, alias="descricao")
    start_time: Optional[datetime] = Field(None, alias="dataInicio")
    end_time: Optional[datetime] = Field(None, alias="dataFim")
    visibility: Optional[str] = Field(None, alias="privacidade")
    color: Optional[str] = Field(None, alias="cor")
    version: Optional[int] = None  # optimistic lock when sent

    model_config = {"populate_by_name": True}


class EventStatusUpdate(BaseModel):
    status: str


class EventOut(BaseModel):
    event_id: int = Field(serialization_alias="id")
    advertiser_id: int = Field(serialization_alias="anuncianteId")
    title: str = Field(serialization_alias="titulo")
    description: Optional[str] = Field(None, serialization_alias="descricao")
    start_time: datetime = Field(serialization_alias="dataInicio")
    end_time: datetime = Field(serialization_alias="dataFim")
    color: str = Field(serialization_alias="cor")
    visibility: Visibility = Field(serialization_alias="privacidade")
    status: EventStatus
    version: int
    created_at: Optional[datetime] = Field(None, serialization_alias="dataCriacao")
    updated_at: Optional[datetime] = Field(None, serialization_alias="dataAtualizacao")

    model_config = {"from_attributes": True}
