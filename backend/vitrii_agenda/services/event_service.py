"""Event store — creation, viewer-filtered reads and status changes for agenda events.

Responsibilities:
- Slot validation: non-blank title, start strictly before end
- Ownership: only users linked to the advertiser may write its agenda
- Visibility: every read goes through ``visibility.is_visible``
- Optimistic locking via the ``version`` column on edits
"""
import logging
from datetime import datetime
from typing import Optional, Any

from sqlalchemy.orm import Session

from vitrii_agenda.config import settings
from vitrii_agenda.errors import ConflictError, NotFoundError, ValidationError
from vitrii_agenda.models.event import Event, EventStatus, Visibility
from vitrii_agenda.services import advertiser_service
from vitrii_agenda.services.clock import stored_utc, to_utc, utcnow
from vitrii_agenda.services.visibility import filter_visible, is_visible

logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = ("title", "description", "start_time", "end_time", "visibility", "color")


def validate_slot(title: Optional[str], start: datetime, end: datetime) -> tuple[str, datetime, datetime]:
    """Check a title/time-range pair and return it normalized to UTC."""
    if not title or not title.strip():
        raise ValidationError("Título é obrigatório")
    start_utc = to_utc(start)
    end_utc = to_utc(end)
    if start_utc >= end_utc:
        raise ValidationError("Data de início deve ser antes da data de fim")
    return title.strip(), start_utc, end_utc


def parse_visibility(value: Optional[str]) -> Visibility:
    try:
        return Visibility(value or settings.DEFAULT_EVENT_VISIBILITY)
    except ValueError:
        valid = ", ".join(v.value for v in Visibility)
        raise ValidationError(f"Privacidade inválida. Valores válidos: {valid}")


def parse_status(value: Optional[str]) -> EventStatus:
    try:
        return EventStatus(value)
    except ValueError:
        valid = ", ".join(s.value for s in EventStatus)
        raise ValidationError(f"Status inválido. Valores válidos: {valid}")


def build_event(
    advertiser_id: int,
    title: str,
    start_utc: datetime,
    end_utc: datetime,
    description: Optional[str] = None,
    visibility: Visibility = Visibility.privado,
    color: Optional[str] = None,
) -> Event:
    """Instantiate an Event from already-validated values (not added to a session)."""
    return Event(
        advertiser_id=advertiser_id,
        title=title,
        description=description or None,
        start_time=start_utc,
        end_time=end_utc,
        visibility=visibility,
        color=color or settings.DEFAULT_EVENT_COLOR,
        status=EventStatus.pendente,
        version=1,
    )


def create_event(
    db: Session,
    advertiser_id: int,
    actor_user_id: Optional[int],
    title: str,
    start: datetime,
    end: datetime,
    description: Optional[str] = None,
    visibility: Optional[str] = None,
    color: Optional[str] = None,
) -> Event:
    """Create an event directly on an advertiser's agenda."""
    title, start_utc, end_utc = validate_slot(title, start, end)
    event_visibility = parse_visibility(visibility)

    advertiser_service.get_advertiser(db, advertiser_id)
    advertiser_service.require_owner(
        db, advertiser_id, actor_user_id,
        "Acesso negado. Você não é responsável por este anunciante.",
    )

    event = build_event(advertiser_id, title, start_utc, end_utc, description, event_visibility, color)
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("Created event '%s' (%s) on advertiser %s by user %s", title, event.event_id, advertiser_id, actor_user_id)
    return event


def list_events_for_viewer(
    db: Session,
    advertiser_id: int,
    viewer_user_id: Optional[int] = None,
    descending: bool = False,
) -> list[Event]:
    """Events of an advertiser the viewer may see, ordered by start time."""
    advertiser_service.get_advertiser(db, advertiser_id)
    owner = advertiser_service.is_owner(db, advertiser_id, viewer_user_id)

    order = Event.start_time.desc() if descending else Event.start_time.asc()
    events = (
        db.query(Event)
        .filter(Event.advertiser_id == advertiser_id)
        .order_by(order, Event.event_id)
        .all()
    )
    return filter_visible(events, viewer_user_id, owner)


def get_event(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.event_id == event_id).first()
    if not event:
        raise NotFoundError("Evento não encontrado")
    return event


def get_event_for_viewer(db: Session, event_id: int, viewer_user_id: Optional[int] = None) -> Event:
    """Fetch one event; hidden events are reported as missing."""
    event = get_event(db, event_id)
    owner = advertiser_service.is_owner(db, event.advertiser_id, viewer_user_id)
    if not is_visible(event.visibility, viewer_user_id, owner):
        raise NotFoundError("Evento não encontrado")
    return event


def _write_versioned(db: Session, event: Event, values: dict[str, Any]) -> None:
    """Apply ``values`` only if the row still has the version this caller read.

    Rolls back and raises ConflictError when another write got there first.
    """
    changes = {getattr(Event, name): value for name, value in values.items()}
    changes[Event.version] = Event.version + 1
    changes[Event.updated_at] = utcnow()

    matched = (
        db.query(Event)
        .filter(Event.event_id == event.event_id, Event.version == event.version)
        .update(changes, synchronize_session=False)
    )
    if matched != 1:
        db.rollback()
        logger.warning("Lost write race on event %s at version %s", event.event_id, event.version)
        raise ConflictError("Este evento foi alterado por outra pessoa. Recarregue e tente novamente.")


def update_event(
    db: Session,
    event_id: int,
    actor_user_id: Optional[int],
    updates: dict[str, Any],
    version: Optional[int] = None,
) -> Event:
    """Partially update an event (owner only, optional optimistic lock)."""
    event = get_event(db, event_id)
    advertiser_service.require_owner(
        db, event.advertiser_id, actor_user_id,
        "Acesso negado. Você não pode editar este evento.",
    )

    if version is not None and event.version != version:
        raise ConflictError(
            f"Versão divergente: atual {event.version}, recebida {version}. Recarregue e tente novamente."
        )

    changes = {k: v for k, v in updates.items() if k in _EDITABLE_FIELDS and v is not None}
    title = changes.get("title", event.title)
    start = changes["start_time"] if "start_time" in changes else stored_utc(event.start_time)
    end = changes["end_time"] if "end_time" in changes else stored_utc(event.end_time)
    title, start_utc, end_utc = validate_slot(title, start, end)

    values = {"title": title, "start_time": start_utc, "end_time": end_utc}
    if "description" in changes:
        values["description"] = changes["description"] or None
    if "visibility" in changes:
        values["visibility"] = parse_visibility(changes["visibility"])
    if "color" in changes:
        values["color"] = changes["color"]

    _write_versioned(db, event, values)
    db.commit()
    db.refresh(event)
    logger.info("Updated event %s to version %d", event_id, event.version)
    return event


def update_event_status(
    db: Session,
    event_id: int,
    actor_user_id: Optional[int],
    new_status: str,
) -> Event:
    """Move an event to any status; transitions between statuses are not restricted."""
    event = get_event(db, event_id)
    event_status = parse_status(new_status)
    advertiser_service.require_owner(
        db, event.advertiser_id, actor_user_id,
        "Acesso negado. Você não pode atualizar este evento.",
    )

    previous = event.status
    _write_versioned(db, event, {"status": event_status})
    db.commit()
    db.refresh(event)
    logger.info("Event %s status %s -> %s", event_id, previous.value, event_status.value)
    return event
