"""
Ledger Store

The only source of truth for room availability and revenue. Wraps a
SQLAlchemy session behind the narrow set of calls the booking workflow and
revenue aggregator need. Every call may raise StoreUnavailable.

The store never caches rooms: each read goes to the database so the
conditional state update always compares against the committed value.
"""

from dataclasses import dataclass
from typing import List, Optional
from sqlalchemy.orm import Session

from ..models.booking import Booking
from ..models.room import Room
from ..models.user import User
from ..utils.db_helpers import compare_and_set, store_errors


@dataclass(frozen=True)
class BookingFilter:
    """Which bookings a query returns. No fields set means every booking."""
    host_email: Optional[str] = None
    guest_email: Optional[str] = None

    @classmethod
    def all(cls) -> "BookingFilter":
        return cls()

    @classmethod
    def for_host(cls, email: str) -> "BookingFilter":
        return cls(host_email=email)

    @classmethod
    def for_guest(cls, email: str) -> "BookingFilter":
        return cls(guest_email=email)


class LedgerStore:
    """
    Store calls used by the booking engine.

    Writes are staged on the session; commit() makes a unit of work durable
    and rollback() discards it.
    """

    def __init__(self, db: Session):
        self.db = db

    # ---------- rooms ----------

    def find_room(self, room_id: str) -> Optional[Room]:
        with store_errors("find_room"):
            return self.db.query(Room).filter(Room.id == room_id).first()

    def conditional_update_room_state(self, room_id: str, expected_state: str, new_state: str) -> bool:
        """Compare-and-set on Room.status. True iff this call made the transition."""
        with store_errors("conditional_update_room_state"):
            return compare_and_set(
                self.db, Room, Room.id == room_id, "status", expected_state, new_state
            )

    def count_rooms(self, host_email: Optional[str] = None) -> int:
        with store_errors("count_rooms"):
            query = self.db.query(Room)
            if host_email:
                query = query.filter(Room.host_email == host_email)
            return query.count()

    # ---------- bookings ----------

    def insert_booking(self, booking: Booking) -> Booking:
        with store_errors("insert_booking"):
            self.db.add(booking)
            self.db.flush()
            return booking

    def find_booking(self, booking_id: str) -> Optional[Booking]:
        with store_errors("find_booking"):
            return self.db.query(Booking).filter(Booking.id == booking_id).first()

    def delete_booking(self, booking_id: str) -> bool:
        with store_errors("delete_booking"):
            deleted = self.db.query(Booking).filter(
                Booking.id == booking_id
            ).delete(synchronize_session=False)
            return deleted == 1

    def query_bookings(self, booking_filter: BookingFilter) -> List[Booking]:
        """Bookings matching the filter, in the store's natural order (no sort)."""
        with store_errors("query_bookings"):
            query = self.db.query(Booking)
            if booking_filter.host_email:
                query = query.filter(Booking.host_email == booking_filter.host_email)
            if booking_filter.guest_email:
                query = query.filter(Booking.guest_email == booking_filter.guest_email)
            return query.all()

    # ---------- users ----------

    def count_users(self) -> int:
        with store_errors("count_users"):
            return self.db.query(User).count()

    def find_user(self, email: str) -> Optional[User]:
        with store_errors("find_user"):
            return self.db.query(User).filter(User.email == email).first()

    # ---------- unit of work ----------

    def commit(self):
        with store_errors("commit"):
            self.db.commit()

    def rollback(self):
        with store_errors("rollback"):
            self.db.rollback()
