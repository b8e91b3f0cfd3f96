import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime
from ..database import Base
import enum


class UserRole(str, enum.Enum):
    GUEST = "guest"
    HOST = "host"
    ADMIN = "admin"


class UserStatus(str, enum.Enum):
    VERIFIED = "Verified"
    REQUESTED = "Requested"  # guest asked to become a host


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=True)
    image = Column(String(500), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.GUEST.value)
    status = Column(String(20), nullable=False, default=UserStatus.VERIFIED.value)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"
