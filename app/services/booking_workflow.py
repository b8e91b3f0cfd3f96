"""
Booking Workflow

Turns a payment authorization, a room's availability and a booking record
into one consistent state.

create_booking:
    1. validate the amount against the room -> InvalidAmount / RoomNotFound
    2. authorize it with the processor      -> AuthorizationFailed
    3. reserve the room (compare-and-set)   -> RoomNotFound / RoomNoLongerAvailable
    4. insert the booking, commit 3 and 4 together

The availability guard runs before the booking insert. When two guests race
for the same room both may get an authorization, but only one wins the
compare-and-set; the loser fails before any booking row exists.

cancel_booking:
    1. find the booking                     -> BookingNotFound
    2. check the requester owns it          -> NotAuthorized
    3. delete it and release the room, commit together

Refunds are handled outside the engine.
"""

import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import List

from ..exceptions import (
    BookingNotFound,
    InvalidAmount,
    NomadHubError,
    NotAuthorized,
    RoomNotFound,
    StoreUnavailable,
)
from ..models.booking import Booking
from ..schemas.booking import BookingCreate
from ..schemas.identity import Identity
from ..utils.logging_config import get_logger
from ..utils.metrics import record_booking_created, record_booking_outcome
from .availability import AvailabilityStateMachine
from .ledger_store import BookingFilter, LedgerStore
from .payment_adapter import AuthorizationHandle, PaymentAdapter, to_minor_units

logger = get_logger(__name__)

CENT = Decimal("0.01")


@dataclass
class BookingResult:
    booking: Booking
    authorization: AuthorizationHandle


class BookingWorkflow:
    """
    Booking and cancellation for one request.

    Built per request around that request's LedgerStore; the payment
    adapter is shared.
    """

    def __init__(self, store: LedgerStore, payments: PaymentAdapter):
        self.store = store
        self.payments = payments
        self.availability = AvailabilityStateMachine(store)

    def create_booking(self, request: BookingCreate, guest: Identity) -> BookingResult:
        start = time.perf_counter()
        try:
            result = self._create_booking(request, guest)
        except NomadHubError as e:
            record_booking_outcome("create", e.code)
            raise

        booking = result.booking
        record_booking_created(booking.category, float(booking.price))
        logger.booking_created(
            booking.id,
            booking.room_id,
            booking.guest_email,
            booking.price,
            duration_ms=round((time.perf_counter() - start) * 1000, 2),
        )
        return result

    def _create_booking(self, request: BookingCreate, guest: Identity) -> BookingResult:
        # 1. amount
        if request.price is None or request.price <= 0:
            raise InvalidAmount("Booking price must be greater than zero")
        amount_minor_units = to_minor_units(request.price)
        price = Decimal(request.price).quantize(CENT, rounding=ROUND_HALF_UP)

        # the amount must be the listed price; read only, the guard in 3 still decides races
        listed = self.store.find_room(request.room_id)
        if listed is None:
            raise RoomNotFound(f"Room {request.room_id} not found")
        if price != Decimal(str(listed.price)).quantize(CENT):
            raise InvalidAmount(f"Booking price {price} does not match the listed price {listed.price}")

        # 2. authorization; nothing has been written yet
        authorization = self.payments.authorize(amount_minor_units)

        # 3 + 4. one unit of work
        try:
            self.availability.reserve(request.room_id)
            booking = Booking(
                room_id=request.room_id,
                room_title=listed.title,
                category=listed.category,
                host_email=listed.host_email,
                host_name=listed.host_name,
                guest_email=guest.email,
                guest_name=request.guest_name or guest.name,
                guest_image=request.guest_image or guest.image,
                date=request.date,
                price=price,
                payment_reference=authorization.id,
            )
            self.store.insert_booking(booking)
            self.store.commit()
        except NomadHubError as e:
            self._abort()
            # TODO: cancel the unused PaymentIntent once refunds/voids are handled here
            logger.warning(
                f"Authorization {authorization.id} left unused for room {request.room_id}: {e.code}"
            )
            raise

        return BookingResult(booking=booking, authorization=authorization)

    def cancel_booking(self, booking_id: str, requester: Identity) -> None:
        try:
            self._cancel_booking(booking_id, requester)
        except NomadHubError as e:
            record_booking_outcome("cancel", e.code)
            raise
        record_booking_outcome("cancel", "success")

    def _cancel_booking(self, booking_id: str, requester: Identity) -> None:
        booking = self.store.find_booking(booking_id)
        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found")

        if booking.guest_email != requester.email:
            raise NotAuthorized("Only the guest who made a booking can cancel it")

        room_id = booking.room_id
        guest_email = booking.guest_email
        try:
            if not self.store.delete_booking(booking_id):
                # Cancelled by a concurrent request after our read
                raise BookingNotFound(f"Booking {booking_id} not found")
            self.availability.release(room_id)
            self.store.commit()
        except NomadHubError:
            self._abort()
            raise

        logger.booking_cancelled(booking_id, room_id, guest_email)

    def guest_bookings(self, guest: Identity) -> List[Booking]:
        return self.store.query_bookings(BookingFilter.for_guest(guest.email))

    def host_bookings(self, host: Identity) -> List[Booking]:
        return self.store.query_bookings(BookingFilter.for_host(host.email))

    def _abort(self):
        """Discard staged writes; the error being handled is what the caller sees"""
        try:
            self.store.rollback()
        except StoreUnavailable as e:
            logger.error(f"Rollback failed: {e}")
