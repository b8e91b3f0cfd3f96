from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal


class RoomCreate(BaseModel):
    """
    New listing from a host.

    There is no status field: rooms always start Available and only the
    booking workflow moves them between states.
    """
    title: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    category: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = Field(None, max_length=5000)
    image: Optional[str] = Field(None, max_length=500)
    guests: int = Field(1, ge=1)
    bedrooms: int = Field(1, ge=0)
    bathrooms: int = Field(1, ge=0)
    price: Decimal = Field(..., gt=0, decimal_places=2)


class RoomResponse(BaseModel):
    id: str
    title: str
    location: Optional[str] = None
    category: str
    description: Optional[str] = None
    image: Optional[str] = None
    guests: int = 1
    bedrooms: int = 1
    bathrooms: int = 1
    price: float
    host_email: str
    host_name: Optional[str] = None
    host_image: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
