"""
Shared fixtures: an in-memory ledger, a scripted payment processor and a
TestClient wired to both.
"""

import itertools
from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import Base, get_db
from app.exceptions import AuthorizationFailed
from app.main import app
from app.models import Booking, Room, RoomStatus, User, UserRole
from app.services.ledger_store import LedgerStore
from app.services.payment_adapter import AuthorizationHandle, PaymentAdapter, get_payment_adapter
from app.utils.rate_limiter import limiter
from app.utils.security import create_access_token


class FakePaymentAdapter(PaymentAdapter):
    """Records every authorization; set fail=True to decline them all"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []
        self._ids = itertools.count(1)

    def authorize(self, amount_minor_units: int) -> AuthorizationHandle:
        self.calls.append(amount_minor_units)
        if self.fail:
            raise AuthorizationFailed("Card declined")
        n = next(self._ids)
        return AuthorizationHandle(
            id=f"pi_test_{n}",
            client_secret=f"pi_test_{n}_secret",
            amount=amount_minor_units,
            currency="usd",
        )


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def store(db):
    return LedgerStore(db)


@pytest.fixture
def payments():
    return FakePaymentAdapter()


@pytest.fixture(autouse=True)
def no_rate_limits():
    limiter.enabled = False
    limiter.reset()
    yield
    limiter.enabled = True


@pytest.fixture
def client(engine, payments):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = TestingSession()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_adapter] = lambda: payments
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_room(db, host_email="host@nomadhub.io", status=RoomStatus.AVAILABLE, **fields):
    room = Room(
        title=fields.pop("title", "Cabin by the lake"),
        category=fields.pop("category", "Lake"),
        price=fields.pop("price", Decimal("120.00")),
        host_email=host_email,
        host_name=fields.pop("host_name", "Hana Host"),
        status=status.value,
        **fields
    )
    db.add(room)
    db.commit()
    db.refresh(room)
    return room


def make_user(db, email, role=UserRole.GUEST, created_at=None):
    user = User(email=email, name=email.split("@")[0], role=role.value)
    if created_at is not None:
        user.created_at = created_at
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_booking(db, room_id="room-1", host_email="host@nomadhub.io",
                 guest_email="guest@nomadhub.io", date=None, price="25.00"):
    booking = Booking(
        room_id=room_id,
        room_title="Cabin by the lake",
        category="Lake",
        host_email=host_email,
        guest_email=guest_email,
        date=date or datetime(2026, 6, 3).date(),
        price=Decimal(price),
        payment_reference="pi_seed",
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


def auth_headers(email, name=None):
    token = create_access_token({"email": email, "name": name})
    return {"Authorization": f"Bearer {token}"}
