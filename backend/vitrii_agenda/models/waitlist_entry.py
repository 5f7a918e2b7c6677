"""WaitlistEntry ORM model — a user's request for a slot on an advertiser's agenda."""
import enum
from sqlalchemy import Column, Date, String, Text, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from vitrii_agenda.database import Base


class WaitlistStatus(str, enum.Enum):
    pendente = "pendente"
    aceito = "aceito"
    rejeitado = "rejeitado"
    sugestao = "sugestao"
    cancelado = "cancelado"


class WaitlistEntry(Base):
    __tablename__ = "filas_espera"

    entry_id = Column(Integer, primary_key=True, autoincrement=True)
    requester_id = Column(Integer, ForeignKey("usuarios.user_id"), nullable=False, index=True)
    advertiser_id = Column(Integer, ForeignKey("anunciantes.advertiser_id"), nullable=False, index=True)
    # NULL until accepted, unless the request contests an existing event
    event_id = Column(Integer, ForeignKey("eventos_agenda.event_id"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    status = Column(SAEnum(WaitlistStatus, native_enum=False, length=30), nullable=False, default=WaitlistStatus.pendente, index=True)
    rejection_reason = Column(Text, nullable=True)
    suggested_date = Column(Date, nullable=True)
    suggested_time = Column(String(5), nullable=True)
    requested_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False, default=1)
