"""Request identity — the ``x-user-id`` header turned into an explicit Viewer.

Credential checks happen upstream; this service only trusts the header.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header

from vitrii_agenda.errors import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Viewer:
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def get_viewer(x_user_id: Optional[str] = Header(None)) -> Viewer:
    """Parse ``x-user-id``; a missing or malformed value means anonymous."""
    if not x_user_id:
        return Viewer()
    try:
        return Viewer(user_id=int(x_user_id))
    except ValueError:
        logger.warning("Ignoring malformed x-user-id header: %r", x_user_id)
        return Viewer()


def require_viewer(viewer: Viewer = Depends(get_viewer)) -> Viewer:
    if not viewer.is_authenticated:
        raise AuthenticationError("Usuário não autenticado")
    return viewer
