"""Domain errors raised by the agenda services.

Each error carries the HTTP status it is rendered with; the handler
registered in ``vitrii_agenda.main`` turns any of them into
``{"error": message}``.
"""
from fastapi import status


class AgendaError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AgendaError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(AgendaError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AgendaError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AgendaError):
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(AgendaError):
    """Transition attempted on a waitlist entry that is no longer pending."""

    status_code = status.HTTP_409_CONFLICT


class ConflictError(AgendaError):
    """The write conflicts with the stored state of the row."""

    status_code = status.HTTP_409_CONFLICT
