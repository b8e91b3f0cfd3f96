import uuid
from datetime import datetime
from sqlalchemy import Column, String, Date, Numeric, DateTime, Index
from ..database import Base


class Booking(Base):
    """
    A confirmed reservation of a room by a guest for a date.

    Rows are append-only: a booking is inserted once by the booking workflow
    and deleted on cancellation, never edited in place. room_id carries no
    foreign key so a booking survives independent deletion of its room.
    """
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_id = Column(String(36), nullable=False, index=True)
    room_title = Column(String(200), nullable=True)
    category = Column(String(50), nullable=True)

    # Host snapshot for per-host queries
    host_email = Column(String(255), nullable=False, index=True)
    host_name = Column(String(100), nullable=True)

    guest_email = Column(String(255), nullable=False, index=True)
    guest_name = Column(String(100), nullable=True)
    guest_image = Column(String(500), nullable=True)

    date = Column(Date, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    payment_reference = Column(String(255), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_booking_payment_reference", "payment_reference"),
    )

    def __repr__(self):
        return f"<Booking {self.guest_email} - {self.date}>"
