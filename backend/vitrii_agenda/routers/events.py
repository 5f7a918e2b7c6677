"""Agenda event API routes — delegates to event_service for validation, ownership and visibility."""
import logging
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from vitrii_agenda.auth import Viewer, get_viewer, require_viewer
from vitrii_agenda.database import get_db
from vitrii_agenda.errors import ForbiddenError
from vitrii_agenda.schemas.event import EventCreate, EventOut, EventStatusUpdate, EventUpdate
from vitrii_agenda.services import advertiser_service, event_service

logger = logging.getLogger(__name__)
router = APIRouter()

_ORDER = Query("asc", pattern="^(asc|desc)$", description="Order by start time")


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(payload: EventCreate, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """Create an event on an advertiser's agenda (owners only)."""
    return event_service.create_event(
        db=db,
        advertiser_id=payload.advertiser_id,
        actor_user_id=viewer.user_id,
        title=payload.title,
        start=payload.start_time,
        end=payload.end_time,
        description=payload.description,
        visibility=payload.visibility,
        color=payload.color,
    )


@router.get("/visiveis/{advertiser_id}", response_model=list[EventOut])
def list_visible_events(
    advertiser_id: int,
    ordem: str = _ORDER,
    viewer: Viewer = Depends(get_viewer),
    db: Session = Depends(get_db),
):
    """Events of an advertiser visible to the caller (anonymous allowed)."""
    return event_service.list_events_for_viewer(
        db, advertiser_id, viewer.user_id, descending=(ordem == "desc"),
    )


@router.get("/anunciante/{advertiser_id}", response_model=list[EventOut])
def list_owner_events(
    advertiser_id: int,
    ordem: str = _ORDER,
    viewer: Viewer = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    """Management view: every event of the advertiser, for its owners."""
    advertiser_service.get_advertiser(db, advertiser_id)
    if not advertiser_service.is_owner(db, advertiser_id, viewer.user_id):
        raise ForbiddenError("Acesso negado. Você não é responsável por este anunciante.")
    return event_service.list_events_for_viewer(
        db, advertiser_id, viewer.user_id, descending=(ordem == "desc"),
    )


@router.get("/{event_id}", response_model=EventOut)
def get_event(event_id: int, viewer: Viewer = Depends(get_viewer), db: Session = Depends(get_db)):
    """Fetch a single event if the caller may see it."""
    return event_service.get_event_for_viewer(db, event_id, viewer.user_id)


@router.put("/{event_id}", response_model=EventOut)
def update_event(
    event_id: int,
    payload: EventUpdate,
    viewer: Viewer = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    """Partially update an event (owners only, optimistic lock when ``version`` is sent)."""
    updates = payload.model_dump(exclude_unset=True, exclude={"version"})
    return event_service.update_event(
        db=db,
        event_id=event_id,
        actor_user_id=viewer.user_id,
        updates=updates,
        version=payload.version,
    )


@router.patch("/{event_id}/status", response_model=EventOut)
def update_event_status(
    event_id: int,
    payload: EventStatusUpdate,
    viewer: Viewer = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    """Change an event's status (pendente, realizado, pendente_pagamento, substituicao)."""
    return event_service.update_event_status(db, event_id, viewer.user_id, payload.status)
