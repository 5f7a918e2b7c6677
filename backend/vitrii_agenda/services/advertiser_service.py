"""Advertiser lookups and ownership checks shared by the agenda services."""
from typing import Optional

from sqlalchemy.orm import Session

from vitrii_agenda.errors import ForbiddenError, NotFoundError
from vitrii_agenda.models.advertiser import Advertiser, AdvertiserMember


def get_advertiser(db: Session, advertiser_id: int) -> Advertiser:
    advertiser = db.query(Advertiser).filter(Advertiser.advertiser_id == advertiser_id).first()
    if not advertiser:
        raise NotFoundError("Anunciante não encontrado")
    return advertiser


def is_owner(db: Session, advertiser_id: int, user_id: Optional[int]) -> bool:
    """True when the user is linked to the advertiser."""
    if user_id is None:
        return False
    link = (
        db.query(AdvertiserMember)
        .filter(AdvertiserMember.advertiser_id == advertiser_id, AdvertiserMember.user_id == user_id)
        .first()
    )
    return link is not None


def require_owner(db: Session, advertiser_id: int, user_id: Optional[int], message: str) -> None:
    if not is_owner(db, advertiser_id, user_id):
        raise ForbiddenError(message)
