import uuid
from datetime import datetime
from sqlalchemy import Column, String, Numeric, Text, Integer, DateTime, Index
from ..database import Base
import enum


class RoomStatus(str, enum.Enum):
    """
    Availability of a room.

    Only the availability state machine writes this column:
    AVAILABLE -> BOOKED on booking, BOOKED -> AVAILABLE on cancellation.
    """
    AVAILABLE = "Available"
    BOOKED = "Booked"


class Room(Base):
    __tablename__ = "rooms"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    location = Column(String(200), nullable=True)
    category = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    image = Column(String(500), nullable=True)
    guests = Column(Integer, default=1)
    bedrooms = Column(Integer, default=1)
    bathrooms = Column(Integer, default=1)
    price = Column(Numeric(10, 2), nullable=False)

    # Owner snapshot
    host_email = Column(String(255), nullable=False, index=True)
    host_name = Column(String(100), nullable=True)
    host_image = Column(String(500), nullable=True)

    status = Column(String(20), nullable=False, default=RoomStatus.AVAILABLE.value)

    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        Index("ix_room_host_status", "host_email", "status"),
    )

    def __repr__(self):
        return f"<Room {self.title} [{self.status}]>"
