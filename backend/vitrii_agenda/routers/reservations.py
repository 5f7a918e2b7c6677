"""Event reservation API routes — seats and per-event waitlist places."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from vitrii_agenda.auth import Viewer, get_viewer, require_viewer
from vitrii_agenda.database import get_db
from vitrii_agenda.schemas.reservation import (
    ReservationCount,
    ReservationCreate,
    ReservationOut,
    ReservationReject,
)
from vitrii_agenda.services import reservation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=ReservationOut, status_code=status.HTTP_201_CREATED)
def create_reservation(payload: ReservationCreate, viewer: Viewer = Depends(get_viewer), db: Session = Depends(get_db)):
    """Reserve a seat or join the event's waitlist (anonymous visitors leave an e-mail)."""
    return reservation_service.create_reservation(
        db=db,
        event_id=payload.event_id,
        kind=payload.kind,
        viewer_user_id=viewer.user_id,
        name=payload.name,
        email=payload.email,
        phone=payload.phone,
    )


@router.get("/{event_id}", response_model=list[ReservationOut])
def list_reservations(event_id: int, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """Every reservation of an event, for the advertiser's owners."""
    return reservation_service.list_reservations_for_event(db, event_id, viewer.user_id)


@router.get("/{event_id}/count", response_model=ReservationCount)
def count_reservations(event_id: int, viewer: Viewer = Depends(get_viewer), db: Session = Depends(get_db)):
    total_reservations, total_waitlist = reservation_service.count_reservations(db, event_id, viewer.user_id)
    return ReservationCount(total_reservations=total_reservations, total_waitlist=total_waitlist)


@router.patch("/{reservation_id}/confirmar", response_model=ReservationOut)
def confirm_reservation(reservation_id: int, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    return reservation_service.confirm(db, reservation_id, viewer.user_id)


@router.patch("/{reservation_id}/rejeitar", response_model=ReservationOut)
def reject_reservation(
    reservation_id: int,
    payload: Optional[ReservationReject] = None,
    viewer: Viewer = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    return reservation_service.reject(db, reservation_id, viewer.user_id, payload.reason if payload else None)


@router.patch("/{reservation_id}/cancelar", response_model=ReservationOut)
def cancel_reservation(reservation_id: int, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """Release a seat or waitlist place (requester or owner)."""
    return reservation_service.cancel(db, reservation_id, viewer.user_id)
