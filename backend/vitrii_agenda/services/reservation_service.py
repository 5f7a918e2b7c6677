"""Event reservations — book a seat on an existing event or join its waitlist.

A reservation starts ``pendente``; an owner of the event's advertiser confirms
or rejects it, and the requester or an owner may cancel it while it still
holds a place. Like the waitlist decisions, each transition is a conditional
update on the status/version the caller read.
"""
import logging
from typing import Iterable, Optional, Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from vitrii_agenda.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from vitrii_agenda.models.reservation import (
    ACTIVE_STATUSES,
    EventReservation,
    ReservationKind,
    ReservationStatus,
)
from vitrii_agenda.models.user import User
from vitrii_agenda.services import advertiser_service, event_service
from vitrii_agenda.services.clock import utcnow

logger = logging.getLogger(__name__)


def parse_kind(value: Optional[str]) -> ReservationKind:
    try:
        return ReservationKind(value)
    except ValueError:
        raise ValidationError("Tipo deve ser 'reserva' ou 'lista_espera'")


def _get_reservation(db: Session, reservation_id: int) -> EventReservation:
    reservation = db.query(EventReservation).filter(EventReservation.reservation_id == reservation_id).first()
    if not reservation:
        raise NotFoundError("Reserva não encontrada")
    return reservation


def _transition(
    db: Session,
    reservation: EventReservation,
    allowed: Iterable[ReservationStatus],
    new_status: ReservationStatus,
    values: dict[str, Any],
) -> None:
    allowed = tuple(allowed)
    if reservation.status not in allowed:
        raise InvalidStateError(f"Esta reserva já está '{reservation.status.value}'")

    changes = {getattr(EventReservation, name): value for name, value in values.items()}
    changes[EventReservation.status] = new_status
    changes[EventReservation.version] = EventReservation.version + 1

    matched = (
        db.query(EventReservation)
        .filter(
            EventReservation.reservation_id == reservation.reservation_id,
            EventReservation.status.in_(allowed),
            EventReservation.version == reservation.version,
        )
        .update(changes, synchronize_session=False)
    )
    if matched != 1:
        db.rollback()
        logger.warning(
            "Lost race on reservation %s (wanted %s at version %s)",
            reservation.reservation_id, new_status.value, reservation.version,
        )
        raise ConflictError("Esta reserva foi alterada por outra pessoa. Recarregue e tente novamente.")


def create_reservation(
    db: Session,
    event_id: int,
    kind: str,
    viewer_user_id: Optional[int] = None,
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None,
) -> EventReservation:
    """Book a seat (``reserva``) or a waitlist place (``lista_espera``) on an event.

    Anonymous visitors must leave an e-mail. A logged-in user may hold only
    one active reservation per event. Waitlist places are numbered after the
    last active one.
    """
    reservation_kind = parse_kind(kind)
    event = event_service.get_event_for_viewer(db, event_id, viewer_user_id)

    if viewer_user_id is None and not email:
        raise ValidationError("Email é obrigatório para usuários não logados")

    if viewer_user_id is not None:
        if not db.query(User).filter(User.user_id == viewer_user_id).first():
            raise NotFoundError("Usuário não encontrado")
        existing = (
            db.query(EventReservation)
            .filter(
                EventReservation.event_id == event.event_id,
                EventReservation.user_id == viewer_user_id,
                EventReservation.status.in_(ACTIVE_STATUSES),
            )
            .first()
        )
        if existing:
            raise ValidationError("Você já possui uma reserva para este evento")

    position = None
    if reservation_kind == ReservationKind.lista_espera:
        last = (
            db.query(func.max(EventReservation.waitlist_position))
            .filter(
                EventReservation.event_id == event.event_id,
                EventReservation.kind == ReservationKind.lista_espera,
                EventReservation.status.in_(ACTIVE_STATUSES),
            )
            .scalar()
        )
        position = (last or 0) + 1

    reservation = EventReservation(
        event_id=event.event_id,
        user_id=viewer_user_id,
        requester_name=name or (None if viewer_user_id is not None else "Anônimo"),
        requester_email=email or None,
        requester_phone=phone or None,
        kind=reservation_kind,
        status=ReservationStatus.pendente,
        waitlist_position=position,
        version=1,
    )
    db.add(reservation)
    db.commit()
    db.refresh(reservation)
    logger.info(
        "Reservation %s (%s) on event %s by %s",
        reservation.reservation_id, reservation_kind.value, event.event_id, viewer_user_id or email,
    )
    return reservation


def list_reservations_for_event(db: Session, event_id: int, actor_user_id: Optional[int]) -> list[EventReservation]:
    """Seats first, then the waitlist in position order (owners only)."""
    event = event_service.get_event(db, event_id)
    advertiser_service.require_owner(
        db, event.advertiser_id, actor_user_id,
        "Acesso negado. Você não é o responsável por este evento.",
    )
    return (
        db.query(EventReservation)
        .filter(EventReservation.event_id == event_id)
        .order_by(
            EventReservation.kind.desc(),
            EventReservation.waitlist_position.asc(),
            EventReservation.requested_at.asc(),
            EventReservation.reservation_id.asc(),
        )
        .all()
    )


def count_reservations(db: Session, event_id: int, viewer_user_id: Optional[int] = None) -> tuple[int, int]:
    """Active seats and active waitlist places of an event the viewer may see."""
    event_service.get_event_for_viewer(db, event_id, viewer_user_id)
    rows = (
        db.query(EventReservation.kind, func.count(EventReservation.reservation_id))
        .filter(
            EventReservation.event_id == event_id,
            EventReservation.status.in_(ACTIVE_STATUSES),
        )
        .group_by(EventReservation.kind)
        .all()
    )
    totals = {kind: total for kind, total in rows}
    return totals.get(ReservationKind.reserva, 0), totals.get(ReservationKind.lista_espera, 0)


def _require_event_owner(db: Session, reservation: EventReservation, actor_user_id: Optional[int], message: str) -> None:
    event = event_service.get_event(db, reservation.event_id)
    advertiser_service.require_owner(db, event.advertiser_id, actor_user_id, message)


def confirm(db: Session, reservation_id: int, actor_user_id: Optional[int]) -> EventReservation:
    reservation = _get_reservation(db, reservation_id)
    _require_event_owner(db, reservation, actor_user_id, "Acesso negado. Você não é o responsável por este evento.")

    _transition(db, reservation, [ReservationStatus.pendente], ReservationStatus.confirmada, {"confirmed_at": utcnow()})
    db.commit()
    db.refresh(reservation)
    logger.info("Reservation %s confirmed by user %s", reservation_id, actor_user_id)
    return reservation


def reject(db: Session, reservation_id: int, actor_user_id: Optional[int], reason: Optional[str] = None) -> EventReservation:
    reservation = _get_reservation(db, reservation_id)
    _require_event_owner(db, reservation, actor_user_id, "Acesso negado. Você não é o responsável por este evento.")

    _transition(db, reservation, [ReservationStatus.pendente], ReservationStatus.rejeitada, {"reason": reason or None})
    db.commit()
    db.refresh(reservation)
    logger.info("Reservation %s rejected by user %s", reservation_id, actor_user_id)
    return reservation


def cancel(db: Session, reservation_id: int, actor_user_id: Optional[int]) -> EventReservation:
    """Release a pending or confirmed reservation (requester or owner)."""
    reservation = _get_reservation(db, reservation_id)
    is_requester = actor_user_id is not None and reservation.user_id == actor_user_id
    if not is_requester:
        event = event_service.get_event(db, reservation.event_id)
        if not advertiser_service.is_owner(db, event.advertiser_id, actor_user_id):
            raise ForbiddenError("Acesso negado. Você não pode cancelar esta reserva.")

    _transition(db, reservation, ACTIVE_STATUSES, ReservationStatus.cancelada, {"cancelled_at": utcnow()})
    db.commit()
    db.refresh(reservation)
    logger.info("Reservation %s cancelled by user %s", reservation_id, actor_user_id)
    return reservation
