"""EventReservation ORM model — a seat booked on an event, or a place on its waitlist."""
import enum
from sqlalchemy import Column, String, Text, DateTime, Integer, ForeignKey, Enum as SAEnum
from sqlalchemy.sql import func
from vitrii_agenda.database import Base


class ReservationKind(str, enum.Enum):
    reserva = "reserva"
    lista_espera = "lista_espera"


class ReservationStatus(str, enum.Enum):
    pendente = "pendente"
    confirmada = "confirmada"
    rejeitada = "rejeitada"
    cancelada = "cancelada"


# Statuses that hold a seat or a waitlist position
ACTIVE_STATUSES = (ReservationStatus.pendente, ReservationStatus.confirmada)


class EventReservation(Base):
    __tablename__ = "reservas_evento"

    reservation_id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("eventos_agenda.event_id"), nullable=False, index=True)
    # NULL for anonymous visitors, who are identified by e-mail instead
    user_id = Column(Integer, ForeignKey("usuarios.user_id"), nullable=True, index=True)
    requester_name = Column(String(150), nullable=True)
    requester_email = Column(String(255), nullable=True)
    requester_phone = Column(String(30), nullable=True)
    kind = Column(SAEnum(ReservationKind, native_enum=False, length=30), nullable=False)
    status = Column(SAEnum(ReservationStatus, native_enum=False, length=30), nullable=False, default=ReservationStatus.pendente, index=True)
    waitlist_position = Column(Integer, nullable=True)
    reason = Column(Text, nullable=True)
    requested_at = Column(DateTime(timezone=True), server_default=func.now())
    confirmed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    version = Column(Integer, nullable=False, default=1)
