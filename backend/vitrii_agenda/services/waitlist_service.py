"""Waitlist queue and approval workflow.

A waitlist entry starts ``pendente`` and is decided exactly once by an owner
of the target advertiser (``aceito``, ``rejeitado`` or ``sugestao``) or
withdrawn (``cancelado``). Every decision is a compare-and-swap on
``status = 'pendente' AND version = <seen>``: when two owners decide the same
entry at once, the slower one gets ConflictError and its transaction,
including any event it created, is rolled back.
"""
import logging
import re
from datetime import date, datetime
from typing import Optional, Any

from sqlalchemy.orm import Session

from vitrii_agenda.config import settings
from vitrii_agenda.errors import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from vitrii_agenda.models.event import Event, Visibility
from vitrii_agenda.models.user import User
from vitrii_agenda.models.waitlist_entry import WaitlistEntry, WaitlistStatus
from vitrii_agenda.services import advertiser_service
from vitrii_agenda.services.clock import stored_utc, utcnow
from vitrii_agenda.services.event_service import build_event, validate_slot

logger = logging.getLogger(__name__)

_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _get_entry(db: Session, entry_id: int) -> WaitlistEntry:
    entry = db.query(WaitlistEntry).filter(WaitlistEntry.entry_id == entry_id).first()
    if not entry:
        raise NotFoundError("Fila de espera não encontrada")
    return entry


def _ensure_pending(entry: WaitlistEntry) -> None:
    if entry.status != WaitlistStatus.pendente:
        raise InvalidStateError(f"Esta solicitação já está '{entry.status.value}'")


def _compare_and_swap(
    db: Session,
    entry: WaitlistEntry,
    new_status: WaitlistStatus,
    values: dict[str, Any],
) -> None:
    """Conditionally move a pending entry to ``new_status``.

    Rolls back the whole transaction and raises ConflictError when the row
    no longer matches the status/version this caller read.
    """
    changes = {getattr(WaitlistEntry, name): value for name, value in values.items()}
    changes[WaitlistEntry.status] = new_status
    changes[WaitlistEntry.responded_at] = utcnow()
    changes[WaitlistEntry.version] = WaitlistEntry.version + 1

    matched = (
        db.query(WaitlistEntry)
        .filter(
            WaitlistEntry.entry_id == entry.entry_id,
            WaitlistEntry.status == WaitlistStatus.pendente,
            WaitlistEntry.version == entry.version,
        )
        .update(changes, synchronize_session=False)
    )
    if matched != 1:
        db.rollback()
        logger.warning(
            "Lost decision race on waitlist entry %s (wanted %s at version %s)",
            entry.entry_id, new_status.value, entry.version,
        )
        raise ConflictError("Esta solicitação foi respondida por outra pessoa. Recarregue e tente novamente.")


# ---------------------------------------------------------------------------
# Queue
# ---------------------------------------------------------------------------
def submit_request(
    db: Session,
    requester_id: int,
    advertiser_id: int,
    title: str,
    start: datetime,
    end: datetime,
    description: Optional[str] = None,
    event_id: Optional[int] = None,
) -> WaitlistEntry:
    """Queue a request for a slot on an advertiser's agenda.

    ``event_id`` of 0/None means a brand-new slot. No overlap check against
    existing events is made.
    """
    title, start_utc, end_utc = validate_slot(title, start, end)
    if not db.query(User).filter(User.user_id == requester_id).first():
        raise NotFoundError("Usuário não encontrado")
    advertiser_service.get_advertiser(db, advertiser_id)

    if event_id:
        # An event of another advertiser is reported exactly like a missing one
        referenced = (
            db.query(Event)
            .filter(Event.event_id == event_id, Event.advertiser_id == advertiser_id)
            .first()
        )
        if not referenced:
            raise NotFoundError("Evento não encontrado")
    else:
        event_id = None

    entry = WaitlistEntry(
        requester_id=requester_id,
        advertiser_id=advertiser_id,
        event_id=event_id,
        title=title,
        description=description or None,
        start_time=start_utc,
        end_time=end_utc,
        status=WaitlistStatus.pendente,
        version=1,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    logger.info("Waitlist entry %s submitted by user %s for advertiser %s", entry.entry_id, requester_id, advertiser_id)
    return entry


def list_requests_for_advertiser(db: Session, advertiser_id: int, actor_user_id: Optional[int]) -> list[WaitlistEntry]:
    """Every request targeting the advertiser, any status, newest first."""
    advertiser_service.get_advertiser(db, advertiser_id)
    advertiser_service.require_owner(
        db, advertiser_id, actor_user_id,
        "Acesso negado. Você não é responsável por este anunciante.",
    )
    return (
        db.query(WaitlistEntry)
        .filter(WaitlistEntry.advertiser_id == advertiser_id)
        .order_by(WaitlistEntry.requested_at.desc(), WaitlistEntry.entry_id.desc())
        .all()
    )


def list_requests_for_user(db: Session, user_id: int) -> list[WaitlistEntry]:
    """Every request the user has submitted, newest first."""
    return (
        db.query(WaitlistEntry)
        .filter(WaitlistEntry.requester_id == user_id)
        .order_by(WaitlistEntry.requested_at.desc(), WaitlistEntry.entry_id.desc())
        .all()
    )


# ---------------------------------------------------------------------------
# Approval workflow
# ---------------------------------------------------------------------------
def accept(db: Session, entry_id: int, actor_user_id: Optional[int]) -> tuple[WaitlistEntry, Event]:
    """Accept a pending request and materialize it as an event, atomically."""
    entry = _get_entry(db, entry_id)
    advertiser_service.require_owner(
        db, entry.advertiser_id, actor_user_id,
        "Acesso negado. Você não pode aprovar esta fila.",
    )
    _ensure_pending(entry)

    event = build_event(
        advertiser_id=entry.advertiser_id,
        title=entry.title,
        start_utc=stored_utc(entry.start_time),
        end_utc=stored_utc(entry.end_time),
        description=entry.description,
        visibility=Visibility(settings.ACCEPTED_EVENT_VISIBILITY),
    )
    db.add(event)
    db.flush()

    _compare_and_swap(db, entry, WaitlistStatus.aceito, {"event_id": event.event_id})
    db.commit()
    db.refresh(entry)
    db.refresh(event)
    logger.info("Waitlist entry %s accepted by user %s; created event %s", entry_id, actor_user_id, event.event_id)
    return entry, event


def reject(db: Session, entry_id: int, actor_user_id: Optional[int], reason: Optional[str] = None) -> WaitlistEntry:
    """Reject a pending request, keeping the optional reason."""
    entry = _get_entry(db, entry_id)
    advertiser_service.require_owner(
        db, entry.advertiser_id, actor_user_id,
        "Acesso negado. Você não pode rejeitar esta fila.",
    )
    _ensure_pending(entry)

    _compare_and_swap(db, entry, WaitlistStatus.rejeitado, {"rejection_reason": reason or None})
    db.commit()
    db.refresh(entry)
    logger.info("Waitlist entry %s rejected by user %s", entry_id, actor_user_id)
    return entry


def counter_propose(
    db: Session,
    entry_id: int,
    actor_user_id: Optional[int],
    suggested_date: date,
    suggested_time: str,
) -> WaitlistEntry:
    """Answer a pending request with an alternative date/time.

    No event is created; the entry stays in ``sugestao``.
    """
    if not suggested_time or not _HHMM.match(suggested_time):
        raise ValidationError("Hora sugerida deve estar no formato HH:MM")

    entry = _get_entry(db, entry_id)
    advertiser_service.require_owner(
        db, entry.advertiser_id, actor_user_id,
        "Acesso negado. Você não pode responder esta fila.",
    )
    _ensure_pending(entry)

    _compare_and_swap(
        db, entry, WaitlistStatus.sugestao,
        {"suggested_date": suggested_date, "suggested_time": suggested_time},
    )
    db.commit()
    db.refresh(entry)
    logger.info("Waitlist entry %s counter-proposed for %s %s", entry_id, suggested_date, suggested_time)
    return entry


def cancel(db: Session, entry_id: int, actor_user_id: Optional[int]) -> WaitlistEntry:
    """Withdraw a pending request (requester or owner)."""
    entry = _get_entry(db, entry_id)
    is_requester = actor_user_id is not None and entry.requester_id == actor_user_id
    if not is_requester and not advertiser_service.is_owner(db, entry.advertiser_id, actor_user_id):
        raise ForbiddenError("Acesso negado. Você não pode cancelar esta fila.")
    _ensure_pending(entry)

    _compare_and_swap(db, entry, WaitlistStatus.cancelado, {})
    db.commit()
    db.refresh(entry)
    logger.info("Waitlist entry %s cancelled by user %s", entry_id, actor_user_id)
    return entry
