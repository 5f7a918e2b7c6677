"""Advertiser API routes — advertiser records and the users that own their agendas."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from vitrii_agenda.auth import Viewer, require_viewer
from vitrii_agenda.database import get_db
from vitrii_agenda.errors import ConflictError, NotFoundError
from vitrii_agenda.models.advertiser import Advertiser, AdvertiserMember
from vitrii_agenda.models.user import User
from vitrii_agenda.schemas.advertiser import AdvertiserCreate, AdvertiserMemberAdd, AdvertiserOut, AdvertiserMemberOut
from vitrii_agenda.services import advertiser_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("", response_model=AdvertiserOut, status_code=status.HTTP_201_CREATED)
def create_advertiser(payload: AdvertiserCreate, viewer: Viewer = Depends(require_viewer), db: Session = Depends(get_db)):
    """Create an advertiser. The caller is linked as its first owner."""
    creator = db.query(User).filter(User.user_id == viewer.user_id).first()
    if not creator:
        raise NotFoundError("Usuário não encontrado")

    advertiser = Advertiser(name=payload.name)
    db.add(advertiser)
    db.flush()

    db.add(AdvertiserMember(advertiser_id=advertiser.advertiser_id, user_id=creator.user_id))
    db.commit()
    db.refresh(advertiser)
    logger.info("Created advertiser '%s' (%s) owned by user %s", advertiser.name, advertiser.advertiser_id, creator.user_id)
    return advertiser


@router.get("/{advertiser_id}", response_model=AdvertiserOut)
def get_advertiser(advertiser_id: int, db: Session = Depends(get_db)):
    """Fetch a single advertiser with its owners."""
    return advertiser_service.get_advertiser(db, advertiser_id)


@router.post("/{advertiser_id}/membros", response_model=AdvertiserMemberOut, status_code=status.HTTP_201_CREATED)
def add_member(
    advertiser_id: int,
    payload: AdvertiserMemberAdd,
    viewer: Viewer = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    """Link another user to the advertiser (owners only)."""
    advertiser_service.get_advertiser(db, advertiser_id)
    advertiser_service.require_owner(
        db, advertiser_id, viewer.user_id,
        "Acesso negado. Você não é responsável por este anunciante.",
    )

    user = db.query(User).filter(User.user_id == payload.user_id).first()
    if not user:
        raise NotFoundError("Usuário não encontrado")
    if advertiser_service.is_owner(db, advertiser_id, payload.user_id):
        raise ConflictError("Usuário já vinculado a este anunciante")

    member = AdvertiserMember(advertiser_id=advertiser_id, user_id=payload.user_id)
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info("Linked user %s to advertiser %s", payload.user_id, advertiser_id)
    return member


@router.delete("/{advertiser_id}/membros/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    advertiser_id: int,
    user_id: int,
    viewer: Viewer = Depends(require_viewer),
    db: Session = Depends(get_db),
):
    """Unlink a user from the advertiser (owners only, never the last one)."""
    advertiser_service.get_advertiser(db, advertiser_id)
    advertiser_service.require_owner(
        db, advertiser_id, viewer.user_id,
        "Acesso negado. Você não é responsável por este anunciante.",
    )
    member = (
        db.query(AdvertiserMember)
        .filter(AdvertiserMember.advertiser_id == advertiser_id, AdvertiserMember.user_id == user_id)
        .first()
    )
    if not member:
        raise NotFoundError("Vínculo não encontrado")

    owners = db.query(AdvertiserMember).filter(AdvertiserMember.advertiser_id == advertiser_id).count()
    if owners <= 1:
        raise ConflictError("O anunciante precisa de pelo menos um responsável")
    db.delete(member)
    db.commit()
    logger.info("Unlinked user %s from advertiser %s", user_id, advertiser_id)
