from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, date
from decimal import Decimal
import re


class BookingCreate(BaseModel):
    """
    Confirmed booking payload submitted by a guest.

    price is deliberately unconstrained here: the booking workflow rejects
    missing or non-positive amounts with InvalidAmount before any side effect.
    """
    room_id: str = Field(..., min_length=1, max_length=36)
    date: date
    price: Optional[Decimal] = Field(None, description="Amount to authorize")
    guest_name: Optional[str] = Field(None, max_length=100)
    guest_image: Optional[str] = Field(None, max_length=500)

    @field_validator('guest_name', 'guest_image', mode='before')
    @classmethod
    def sanitize_text_fields(cls, v):
        """Strip script tags and inline event handlers"""
        if v is None:
            return v
        if isinstance(v, str):
            v = re.sub(r'<script[^>]*>.*?</script>', '', v, flags=re.IGNORECASE | re.DOTALL)
            v = re.sub(r'on\w+\s*=', '', v, flags=re.IGNORECASE)
            v = v.strip()
        return v


class BookingResponse(BaseModel):
    id: str
    room_id: str
    room_title: Optional[str] = None
    category: Optional[str] = None
    host_email: str
    host_name: Optional[str] = None
    guest_email: str
    guest_name: Optional[str] = None
    guest_image: Optional[str] = None
    date: date
    price: float
    payment_reference: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookingCreatedResponse(BookingResponse):
    """Returned once, right after creation: carries the secret the client pays with"""
    client_secret: str
