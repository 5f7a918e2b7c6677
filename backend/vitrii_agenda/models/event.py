"""Event ORM model — calendar entry owned by an advertiser."""
import enum
from sqlalchemy import Column, String, Text, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from vitrii_agenda.database import Base


class Visibility(str, enum.Enum):
    publico = "publico"
    privado_usuarios = "privado_usuarios"
    privado = "privado"


class EventStatus(str, enum.Enum):
    pendente = "pendente"
    realizado = "realizado"
    pendente_pagamento = "pendente_pagamento"
    substituicao = "substituicao"


class Event(Base):
    __tablename__ = "eventos_agenda"

    event_id = Column(Integer, primary_key=True, autoincrement=True)
    advertiser_id = Column(Integer, ForeignKey("anunciantes.advertiser_id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    color = Column(String(20), nullable=False, default="#3B82F6")
    visibility = Column(SAEnum(Visibility, native_enum=False, length=30), nullable=False, default=Visibility.privado)
    status = Column(SAEnum(EventStatus, native_enum=False, length=30), nullable=False, default=EventStatus.pendente, index=True)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
