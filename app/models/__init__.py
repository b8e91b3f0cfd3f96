# Models package
from .user import User, UserRole, UserStatus
from .room import Room, RoomStatus
from .booking import Booking

__all__ = [
    "User", "UserRole", "UserStatus",
    "Room", "RoomStatus",
    "Booking",
]
