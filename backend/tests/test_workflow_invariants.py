"""Service-level checks for the rules every endpoint relies on.

- Visibility predicate for each (visibility, viewer) pair
- Wall-clock datetimes read in the agenda time zone
- A pending entry is decided once, even when two owners race
- Event edits and reservation decisions only apply to the version they read
"""
from datetime import date, datetime

import pytest
import pytz

from vitrii_agenda.config import Settings
from vitrii_agenda.errors import ConflictError, ForbiddenError, InvalidStateError, ValidationError
from vitrii_agenda.models.advertiser import Advertiser, AdvertiserMember
from vitrii_agenda.models.event import Event, Visibility
from vitrii_agenda.models.reservation import EventReservation, ReservationStatus
from vitrii_agenda.models.user import User
from vitrii_agenda.models.waitlist_entry import WaitlistEntry, WaitlistStatus
from vitrii_agenda.services import clock, event_service, reservation_service, waitlist_service
from vitrii_agenda.services.visibility import is_visible

OWNER_ID = 1
REQUESTER_ID = 2
SECOND_OWNER_ID = 3
ADVERTISER_ID = 7


@pytest.fixture
def seeded(db):
    """One advertiser with two owners and one requester."""
    db.add_all([
        User(user_id=OWNER_ID, name="Dona"),
        User(user_id=REQUESTER_ID, name="Cliente"),
        User(user_id=SECOND_OWNER_ID, name="Sócio"),
        Advertiser(advertiser_id=ADVERTISER_ID, name="Salão"),
    ])
    db.flush()
    db.add_all([
        AdvertiserMember(advertiser_id=ADVERTISER_ID, user_id=OWNER_ID),
        AdvertiserMember(advertiser_id=ADVERTISER_ID, user_id=SECOND_OWNER_ID),
    ])
    db.commit()
    return db


def _submit(db):
    return waitlist_service.submit_request(
        db,
        requester_id=REQUESTER_ID,
        advertiser_id=ADVERTISER_ID,
        title="Corte",
        start=datetime(2025, 3, 1, 10, tzinfo=pytz.utc),
        end=datetime(2025, 3, 1, 11, tzinfo=pytz.utc),
    )


@pytest.mark.parametrize("visibility, viewer, owner, expected", [
    (Visibility.publico, None, False, True),
    (Visibility.publico, 42, False, True),
    (Visibility.privado_usuarios, None, False, False),
    (Visibility.privado_usuarios, 42, False, True),
    (Visibility.privado, None, False, False),
    (Visibility.privado, 42, False, False),
    (Visibility.privado, 42, True, True),
    (Visibility.privado_usuarios, 42, True, True),
])
def test_visibility_rule(visibility, viewer, owner, expected):
    assert is_visible(visibility, viewer, owner) is expected


class TestClock:

    def test_naive_value_is_agenda_wall_clock(self):
        # America/Sao_Paulo has been UTC-3 year-round since 2019
        converted = clock.to_utc(datetime(2025, 3, 1, 10, 0))
        assert converted == datetime(2025, 3, 1, 13, 0, tzinfo=pytz.utc)

    def test_aware_value_is_converted(self):
        tokyo = pytz.timezone("Asia/Tokyo").localize(datetime(2025, 3, 1, 19, 0))
        assert clock.to_utc(tokyo) == datetime(2025, 3, 1, 10, 0, tzinfo=pytz.utc)

    def test_stored_naive_value_is_utc(self):
        assert clock.stored_utc(datetime(2025, 3, 1, 10, 0)).tzinfo is not None
        assert clock.stored_utc(datetime(2025, 3, 1, 10, 0)) == datetime(2025, 3, 1, 10, 0, tzinfo=pytz.utc)


class TestSingleDecision:

    def test_accept_links_event(self, seeded):
        entry = _submit(seeded)
        entry, event = waitlist_service.accept(seeded, entry.entry_id, OWNER_ID)

        assert entry.status == WaitlistStatus.aceito
        assert entry.event_id == event.event_id
        assert entry.responded_at is not None
        assert clock.stored_utc(event.start_time) == clock.stored_utc(entry.start_time)
        assert clock.stored_utc(event.end_time) == clock.stored_utc(entry.end_time)

    def test_decided_entry_rejects_every_transition(self, seeded):
        entry = _submit(seeded)
        waitlist_service.reject(seeded, entry.entry_id, OWNER_ID, "Lotado")

        with pytest.raises(InvalidStateError):
            waitlist_service.accept(seeded, entry.entry_id, OWNER_ID)
        with pytest.raises(InvalidStateError):
            waitlist_service.reject(seeded, entry.entry_id, OWNER_ID)
        with pytest.raises(InvalidStateError):
            waitlist_service.counter_propose(seeded, entry.entry_id, OWNER_ID, date(2025, 3, 2), "09:00")
        with pytest.raises(InvalidStateError):
            waitlist_service.cancel(seeded, entry.entry_id, REQUESTER_ID)

    def test_requester_cannot_decide(self, seeded):
        entry = _submit(seeded)
        with pytest.raises(ForbiddenError):
            waitlist_service.accept(seeded, entry.entry_id, REQUESTER_ID)

    def test_time_validated_before_lookup(self, seeded):
        with pytest.raises(ValidationError):
            waitlist_service.counter_propose(seeded, 9999, OWNER_ID, date(2025, 3, 2), "9h")

    def test_concurrent_accept_creates_one_event(self, seeded, session_factory):
        """The owner whose write lands second gets a conflict and leaves no event behind."""
        entry = _submit(seeded)
        entry_id = entry.entry_id
        assert entry.status == WaitlistStatus.pendente

        # The first session still holds the pending copy it loaded above
        other = session_factory()
        try:
            waitlist_service.accept(other, entry_id, SECOND_OWNER_ID)
        finally:
            other.close()

        with pytest.raises(ConflictError):
            waitlist_service.accept(seeded, entry_id, OWNER_ID)

        check = session_factory()
        try:
            assert check.query(Event).count() == 1
            stored = check.query(WaitlistEntry).filter(WaitlistEntry.entry_id == entry_id).one()
            assert stored.status == WaitlistStatus.aceito
            assert stored.version == 2
        finally:
            check.close()

    def test_concurrent_reject_after_accept(self, seeded, session_factory):
        entry = _submit(seeded)
        entry_id = entry.entry_id

        other = session_factory()
        try:
            waitlist_service.accept(other, entry_id, SECOND_OWNER_ID)
        finally:
            other.close()

        with pytest.raises(ConflictError):
            waitlist_service.reject(seeded, entry_id, OWNER_ID, "Tarde demais")

        check = session_factory()
        try:
            stored = check.query(WaitlistEntry).filter(WaitlistEntry.entry_id == entry_id).one()
            assert stored.status == WaitlistStatus.aceito
            assert stored.rejection_reason is None
        finally:
            check.close()


class TestVersionedEventWrites:

    def _event(self, db):
        return event_service.create_event(
            db, ADVERTISER_ID, OWNER_ID, "Aula",
            datetime(2025, 3, 1, 10, tzinfo=pytz.utc), datetime(2025, 3, 1, 11, tzinfo=pytz.utc),
        )

    def test_concurrent_edits_with_same_version(self, seeded, session_factory):
        """Two edits that both read version 1: only the first one lands."""
        event = self._event(seeded)
        event_id = event.event_id
        assert event.version == 1

        other = session_factory()
        try:
            event_service.update_event(other, event_id, SECOND_OWNER_ID, {"title": "Primeira"}, version=1)
        finally:
            other.close()

        with pytest.raises(ConflictError):
            event_service.update_event(seeded, event_id, OWNER_ID, {"title": "Segunda"}, version=1)

        check = session_factory()
        try:
            stored = check.query(Event).filter(Event.event_id == event_id).one()
            assert stored.title == "Primeira"
            assert stored.version == 2
        finally:
            check.close()

    def test_status_change_after_concurrent_edit(self, seeded, session_factory):
        event = self._event(seeded)
        event_id = event.event_id

        other = session_factory()
        try:
            event_service.update_event(other, event_id, SECOND_OWNER_ID, {"color": "#10B981"})
        finally:
            other.close()

        with pytest.raises(ConflictError):
            event_service.update_event_status(seeded, event_id, OWNER_ID, "realizado")


class TestReservationDecisions:

    def test_confirm_loses_to_concurrent_reject(self, seeded, session_factory):
        event = event_service.create_event(
            seeded, ADVERTISER_ID, OWNER_ID, "Workshop",
            datetime(2025, 3, 1, 10, tzinfo=pytz.utc), datetime(2025, 3, 1, 11, tzinfo=pytz.utc),
            visibility="publico",
        )
        reservation = reservation_service.create_reservation(seeded, event.event_id, "reserva", REQUESTER_ID)
        reservation_id = reservation.reservation_id
        assert reservation.status == ReservationStatus.pendente

        other = session_factory()
        try:
            reservation_service.reject(other, reservation_id, SECOND_OWNER_ID, "Lotado")
        finally:
            other.close()

        with pytest.raises(ConflictError):
            reservation_service.confirm(seeded, reservation_id, OWNER_ID)

        check = session_factory()
        try:
            stored = check.query(EventReservation).filter(EventReservation.reservation_id == reservation_id).one()
            assert stored.status == ReservationStatus.rejeitada
            assert stored.confirmed_at is None
        finally:
            check.close()


def test_default_database_url_names_installed_driver():
    default = Settings.model_fields["DATABASE_URL"].default
    assert default.startswith("postgresql+psycopg2://")
