from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from ..database import get_db
from ..exceptions import RoomNoLongerAvailable, RoomNotFound
from ..models.room import Room, RoomStatus
from ..models.user import UserRole
from ..schemas.identity import Identity
from ..schemas.room import RoomCreate, RoomResponse
from ..schemas.user import MessageResponse
from ..utils.db_helpers import store_errors
from ..utils.dependencies import require_role
from ..utils.rate_limiter import limiter, get_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Rooms"])


@router.get("/rooms", response_model=List[RoomResponse])
@limiter.limit(get_rate_limit("room_list"))
def get_rooms(
    request: Request,
    category: Optional[str] = Query(None, description="Filter by category tag"),
    db: Session = Depends(get_db)
):
    """All listings, optionally for one category"""
    with store_errors("get_rooms"):
        query = db.query(Room)
        # the browse page sends the literal string "null" when no tab is selected
        if category and category != "null":
            query = query.filter(Room.category == category)
        return query.all()


@router.get("/room/{room_id}", response_model=RoomResponse)
def get_room(room_id: str, db: Session = Depends(get_db)):
    with store_errors("get_room"):
        room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise RoomNotFound(f"Room {room_id} not found")
    return room


@router.post("/room", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
@router.post("/add-room", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(
    room_data: RoomCreate,
    host: Identity = Depends(require_role(UserRole.HOST)),
    db: Session = Depends(get_db)
):
    """Add a listing owned by the caller; new rooms are always Available"""
    room = Room(
        **room_data.model_dump(),
        host_email=host.email,
        host_name=host.name,
        host_image=host.image,
        status=RoomStatus.AVAILABLE.value,
    )
    with store_errors("create_room"):
        db.add(room)
        db.commit()
        db.refresh(room)
    logger.info(f"Room {room.id} listed by {host.email}")
    return room


@router.get("/my-listings", response_model=List[RoomResponse])
def get_my_listings(
    host: Identity = Depends(require_role(UserRole.HOST)),
    db: Session = Depends(get_db)
):
    with store_errors("get_my_listings"):
        return db.query(Room).filter(Room.host_email == host.email).all()


@router.get("/my-listings/{email}", response_model=List[RoomResponse])
def get_listings_for_email(
    email: str,
    host: Identity = Depends(require_role(UserRole.HOST)),
    db: Session = Depends(get_db)
):
    """Path form used by the dashboard; a host may only read their own listings"""
    if email != host.email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="forbidden access"
        )
    return get_my_listings(host=host, db=db)


@router.delete("/room/{room_id}", response_model=MessageResponse)
@router.delete("/delete-room/{room_id}", response_model=MessageResponse)
def delete_room(
    room_id: str,
    host: Identity = Depends(require_role(UserRole.HOST)),
    db: Session = Depends(get_db)
):
    """
    Remove a listing. Only the owning host may delete it, and only while it
    is Available; the delete is conditional on the status so it cannot
    interleave with a booking.
    """
    with store_errors("delete_room"):
        room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise RoomNotFound(f"Room {room_id} not found")
    if room.host_email != host.email:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="forbidden access"
        )

    with store_errors("delete_room"):
        deleted = db.query(Room).filter(
            Room.id == room_id,
            Room.status == RoomStatus.AVAILABLE.value
        ).delete(synchronize_session=False)
        db.commit()

    if deleted != 1:
        raise RoomNoLongerAvailable(f"Room {room_id} is booked and cannot be deleted")

    logger.info(f"Room {room_id} deleted by {host.email}")
    return MessageResponse(success=True)
