from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from ..models.user import UserRole, UserStatus


class UserSave(BaseModel):
    """Profile sent by the client after every sign-in"""
    email: str = Field(..., min_length=3, max_length=255)
    name: Optional[str] = Field(None, max_length=100)
    image: Optional[str] = Field(None, max_length=500)
    status: Optional[UserStatus] = None


class UserUpdate(BaseModel):
    """Admin change of role and/or status"""
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class UserResponse(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    image: Optional[str] = None
    role: str
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TokenRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    name: Optional[str] = Field(None, max_length=100)


class MessageResponse(BaseModel):
    success: bool = True
