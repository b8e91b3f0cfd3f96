"""
Concurrency Tests for Race Condition Prevention

Tests cover:
- Two guests racing for the same room: exactly one booking wins
- A cancellation racing a cancellation of the same booking

Each worker uses its own connection to a file-backed SQLite database so
the compare-and-set is arbitrated by the database, not by the test.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.database import Base, build_connect_args
from app.exceptions import BookingNotFound, NomadHubError, RoomNoLongerAvailable
from app.models.booking import Booking
from app.models.room import Room, RoomStatus
from app.schemas.booking import BookingCreate
from app.schemas.identity import Identity
from app.services.booking_workflow import BookingWorkflow
from app.services.ledger_store import LedgerStore

from conftest import FakePaymentAdapter


@pytest.fixture
def file_sessions(tmp_path):
    url = f"sqlite:///{tmp_path / 'race.db'}"
    engine = create_engine(url, connect_args=build_connect_args(url, 10.0))
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


def seed_room(Session):
    session = Session()
    room = Room(
        title="Treehouse",
        category="Forest",
        price=Decimal("80.00"),
        host_email="host@nomadhub.io",
        status=RoomStatus.AVAILABLE.value,
    )
    session.add(room)
    session.commit()
    room_id = room.id
    session.close()
    return room_id


class TestBookingRace:
    """Tests for booking double-booking prevention"""

    def test_two_guests_one_room(self, file_sessions):
        room_id = seed_room(file_sessions)
        payments = FakePaymentAdapter()
        barrier = threading.Barrier(2)

        def attempt(guest_email):
            session = file_sessions()
            try:
                workflow = BookingWorkflow(LedgerStore(session), payments)
                request = BookingCreate(room_id=room_id, date=date(2026, 6, 3), price="80.00")
                barrier.wait()
                try:
                    result = workflow.create_booking(request, Identity(email=guest_email))
                    return ("ok", result.booking.guest_email)
                except NomadHubError as e:
                    return ("error", e)
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=2) as pool:
            outcomes = list(pool.map(attempt, ["ana@guest.io", "ben@guest.io"]))

        successes = [o for o in outcomes if o[0] == "ok"]
        failures = [o[1] for o in outcomes if o[0] == "error"]
        assert len(successes) == 1
        assert len(failures) == 1
        assert isinstance(failures[0], RoomNoLongerAvailable)

        # both were authorized, only the winner was recorded
        assert len(payments.calls) == 2

        session = file_sessions()
        try:
            bookings = session.query(Booking).all()
            assert len(bookings) == 1
            assert bookings[0].guest_email == successes[0][1]
            room = session.query(Room).filter(Room.id == room_id).first()
            assert room.status == RoomStatus.BOOKED.value
        finally:
            session.close()

    def test_racing_cancellations(self, file_sessions):
        room_id = seed_room(file_sessions)
        guest = Identity(email="ana@guest.io")
        payments = FakePaymentAdapter()

        session = file_sessions()
        booking_id = BookingWorkflow(LedgerStore(session), payments).create_booking(
            BookingCreate(room_id=room_id, date=date(2026, 6, 3), price="80.00"), guest
        ).booking.id
        session.close()

        barrier = threading.Barrier(2)

        def cancel(_):
            session = file_sessions()
            try:
                workflow = BookingWorkflow(LedgerStore(session), payments)
                barrier.wait()
                try:
                    workflow.cancel_booking(booking_id, guest)
                    return "ok"
                except BookingNotFound:
                    return "not_found"
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=2) as pool:
            outcomes = sorted(pool.map(cancel, range(2)))

        assert outcomes == ["not_found", "ok"]

        session = file_sessions()
        try:
            assert session.query(Booking).count() == 0
            room = session.query(Room).filter(Room.id == room_id).first()
            assert room.status == RoomStatus.AVAILABLE.value
        finally:
            session.close()
