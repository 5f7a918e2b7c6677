"""Waitlist API routes — request a slot, then an owner accepts, rejects or counter-proposes."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from vitrii_agenda.auth import Viewer, require_viewer
from vitrii_agenda.database import get_db
from vitrii_agenda.schemas.event import EventOut
from vitrii_agenda.schemas.waitlist import (
    WaitlistAcceptOut,
    WaitlistCounterProposal,
    WaitlistCreate,
    WaitlistOut,
    WaitlistReject,
)
from vitrii_agenda.services import waitlist_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=WaitlistOut, status_code=status.HTTP_201_CREATED)
def submit_request(payload: WaitlistCreate, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """Queue a request for a slot on an advertiser's agenda (always ``pendente``)."""
    return waitlist_service.submit_request(
        db=db,
        requester_id=viewer.user_id,
        advertiser_id=payload.advertiser_id,
        title=payload.title,
        start=payload.start_time,
        end=payload.end_time,
        description=payload.description,
        event_id=payload.event_id,
    )


@router.get("/anunciante/{advertiser_id}", response_model=list[WaitlistOut])
def list_for_advertiser(advertiser_id: int, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """All requests targeting the advertiser, any status (owners only)."""
    return waitlist_service.list_requests_for_advertiser(db, advertiser_id, viewer.user_id)


@router.get("/usuario", response_model=list[WaitlistOut])
def list_for_user(viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """All requests the caller has submitted."""
    return waitlist_service.list_requests_for_user(db, viewer.user_id)


@router.post("/{entry_id}/aprovar", response_model=WaitlistAcceptOut)
@router.post("/{entry_id}/aceitar", response_model=WaitlistAcceptOut)
def accept_request(entry_id: int, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """Accept a pending request — creates the event and flips the entry to ``aceito`` in one transaction."""
    entry, event = waitlist_service.accept(db, entry_id, viewer.user_id)
    return WaitlistAcceptOut(
        fila=WaitlistOut.model_validate(entry),
        evento=EventOut.model_validate(event),
    )


@router.post("/{entry_id}/rejeitar", response_model=WaitlistOut)
def reject_request(
    entry_id: int,
    payload: Optional[WaitlistReject] = None,
    viewer: Viewer = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    """Reject a pending request with an optional reason."""
    return waitlist_service.reject(db, entry_id, viewer.user_id, payload.reason if payload else None)


@router.post("/{entry_id}/sugerir", response_model=WaitlistOut)
def counter_propose(
    entry_id: int,
    payload: WaitlistCounterProposal,
    viewer: Viewer = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    """Answer a pending request with another date/time; no event is created."""
    return waitlist_service.counter_propose(
        db, entry_id, viewer.user_id, payload.suggested_date, payload.suggested_time,
    )


@router.post("/{entry_id}/cancelar", response_model=WaitlistOut)
def cancel_request(entry_id: int, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """Withdraw a pending request (requester or owner)."""
    return waitlist_service.cancel(db, entry_id, viewer.user_id)
