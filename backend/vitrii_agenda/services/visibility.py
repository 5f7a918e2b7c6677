"""Visibility filter — the single rule deciding who may see an agenda event."""
from typing import Iterable, Optional

from vitrii_agenda.models.event import Event, Visibility


def is_visible(visibility: Visibility, viewer_user_id: Optional[int], is_owner: bool) -> bool:
    """Return True if a viewer may see an event with the given visibility.

    - owners of the advertiser see everything
    - ``publico``: everyone, including anonymous viewers
    - ``privado_usuarios``: any authenticated viewer
    - ``privado``: owners only
    """
    if is_owner:
        return True
    if visibility == Visibility.publico:
        return True
    if visibility == Visibility.privado_usuarios:
        return viewer_user_id is not None
    return False


def filter_visible(events: Iterable[Event], viewer_user_id: Optional[int], is_owner: bool) -> list[Event]:
    return [ev for ev in events if is_visible(ev.visibility, viewer_user_id, is_owner)]
