"""Pydantic schemas for event reservations."""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from vitrii_agenda.models.reservation import ReservationKind, ReservationStatus


class ReservationCreate(BaseModel):
    event_id: int = Field(alias="eventoId")
    kind: str = Field(alias="tipo")  # reserva | lista_espera
    name: Optional[str] = Field(None, alias="nomeSolicitante", max_length=150)
    email: Optional[str] = Field(None, alias="emailSolicitante", max_length=255)
    phone: Optional[str] = Field(None, alias="telefoneSolicitante", max_length=30)

    model_config = {"populate_by_name": True}


class ReservationReject(BaseModel):
    reason: Optional[str] = Field(None, alias="motivo")

    model_config = {"populate_by_name": True}


class ReservationOut(BaseModel):
    reservation_id: int = Field(serialization_alias="id")
    event_id: int = Field(serialization_alias="eventoId")
    user_id: Optional[int] = Field(None, serialization_alias="usuarioId")
    requester_name: Optional[str] = Field(None, serialization_alias="nomeSolicitante")
    requester_email: Optional[str] = Field(None, serialization_alias="emailSolicitante")
    requester_phone: Optional[str] = Field(None, serialization_alias="telefoneSolicitante")
    kind: ReservationKind = Field(serialization_alias="tipo")
    status: ReservationStatus
    waitlist_position: Optional[int] = Field(None, serialization_alias="posicaoListaEspera")
    reason: Optional[str] = Field(None, serialization_alias="motivo")
    requested_at: Optional[datetime] = Field(None, serialization_alias="dataSolicitacao")
    confirmed_at: Optional[datetime] = Field(None, serialization_alias="dataConfirmacao")
    cancelled_at: Optional[datetime] = Field(None, serialization_alias="dataCancelamento")
    version: int

    model_config = {"from_attributes": True}


class ReservationCount(BaseModel):
    total_reservations: int = Field(serialization_alias="totalReservas")
    total_waitlist: int = Field(serialization_alias="totalListaEspera")
