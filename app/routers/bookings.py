from fastapi import APIRouter, Depends, Request, status
from typing import List
import logging

from ..models.booking import Booking
from ..models.user import UserRole
from ..schemas.booking import BookingCreate, BookingCreatedResponse, BookingResponse
from ..schemas.identity import Identity
from ..schemas.user import MessageResponse
from ..services.booking_workflow import BookingWorkflow
from ..utils.dependencies import get_booking_workflow, get_current_identity, require_role
from ..utils.rate_limiter import limiter, get_rate_limit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/bookings", tags=["Bookings"])


def to_booking_response(booking: Booking) -> BookingResponse:
    return BookingResponse.model_validate(booking)


@router.post("", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit("booking_create"))
def create_booking(
    request: Request,
    booking_data: BookingCreate,
    guest: Identity = Depends(get_current_identity),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    """
    Book a room.

    Authorizes the price with the payment processor, flips the room to
    Booked and stores the booking. The response carries the client secret the
    guest completes payment with.

    Errors: 400 InvalidAmount, 402 AuthorizationFailed, 404 RoomNotFound,
    409 RoomNoLongerAvailable, 503 StoreUnavailable.
    """
    result = workflow.create_booking(booking_data, guest)
    response = to_booking_response(result.booking)
    return BookingCreatedResponse(
        **response.model_dump(),
        client_secret=result.authorization.client_secret
    )


@router.get("/my", response_model=List[BookingResponse])
@limiter.limit(get_rate_limit("booking_list"))
def get_my_bookings(
    request: Request,
    guest: Identity = Depends(get_current_identity),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    """Bookings made by the caller"""
    return [to_booking_response(b) for b in workflow.guest_bookings(guest)]


@router.get("/manage", response_model=List[BookingResponse])
@limiter.limit(get_rate_limit("booking_list"))
def get_host_bookings(
    request: Request,
    host: Identity = Depends(require_role(UserRole.HOST)),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    """Bookings on rooms the caller hosts"""
    return [to_booking_response(b) for b in workflow.host_bookings(host)]


@router.delete("/{booking_id}", response_model=MessageResponse)
@limiter.limit(get_rate_limit("booking_cancel"))
def cancel_booking(
    request: Request,
    booking_id: str,
    guest: Identity = Depends(get_current_identity),
    workflow: BookingWorkflow = Depends(get_booking_workflow)
):
    """
    Cancel one of the caller's bookings and make the room Available again.

    Errors: 404 BookingNotFound, 403 NotAuthorized, 503 StoreUnavailable.
    """
    workflow.cancel_booking(booking_id, guest)
    return MessageResponse(success=True)
