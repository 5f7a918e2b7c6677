"""Pydantic schemas for waitlist entries and their decisions."""
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from vitrii_agenda.models.waitlist_entry import WaitlistStatus
from vitrii_agenda.schemas.event import EventOut


class WaitlistCreate(BaseModel):
    event_id: Optional[int] = Field(None, alias="eventoId")  # 0 or absent: new slot
    advertiser_id: int = Field(alias="anuncianteAlvoId")
    title: str = Field(alias="titulo")
    description: Optional[str] = Field(None, alias="descricao")
    start_time: datetime = Field(alias="dataInicio")
    end_time: datetime = Field(alias="dataFim")

    model_config = {"populate_by_name": True}


class WaitlistReject(BaseModel):
    reason: Optional[str] = Field(None, alias="motivo")

    model_config = {"populate_by_name": True}


class WaitlistCounterProposal(BaseModel):
    suggested_date: date = Field(alias="dataSugestao")
    suggested_time: str = Field(alias="horaSugestao")

    model_config = {"populate_by_name": True}


class WaitlistOut(BaseModel):
    entry_id: int = Field(serialization_alias="id")
    requester_id: int = Field(serialization_alias="usuarioSolicitanteId")
    advertiser_id: int = Field(serialization_alias="anuncianteAlvoId")
    event_id: Optional[int] = Field(None, serialization_alias="eventoId")
    title: str = Field(serialization_alias="titulo")
    description: Optional[str] = Field(None, serialization_alias="descricao")
    start_time: datetime = Field(serialization_alias="dataInicio")
    end_time: datetime = Field(serialization_alias="dataFim")
    status: WaitlistStatus
    rejection_reason: Optional[str] = Field(None, serialization_alias="motivoRejeicao")
    suggested_date: Optional[date] = Field(None, serialization_alias="dataSugestao")
    suggested_time: Optional[str] = Field(None, serialization_alias="horaSugestao")
    requested_at: Optional[datetime] = Field(None, serialization_alias="dataSolicitacao")
    responded_at: Optional[datetime] = Field(None, serialization_alias="dataResposta")
    version: int

    model_config = {"from_attributes": True}


class WaitlistAcceptOut(BaseModel):
    fila: WaitlistOut
    evento: EventOut
