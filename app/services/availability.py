"""
Availability State Machine

Rooms have two states, Available and Booked:

    Available --reserve--> Booked     (guarded compare-and-set)
    Booked    --release--> Available  (after the booking is deleted)

Both transitions go through LedgerStore.conditional_update_room_state, so
the database row is the only arbiter when requests race on a room. There is
no in-process lock and no cached room state.
"""

from ..exceptions import RoomNotFound, RoomNoLongerAvailable
from ..models.room import RoomStatus
from ..utils.logging_config import get_logger
from .ledger_store import LedgerStore

logger = get_logger(__name__)


class AvailabilityStateMachine:

    def __init__(self, store: LedgerStore):
        self.store = store

    def reserve(self, room_id: str) -> None:
        """
        Transition Available -> Booked.

        Raises:
            RoomNotFound: no room with this id
            RoomNoLongerAvailable: another request already booked it
        """
        if self.store.conditional_update_room_state(
            room_id, RoomStatus.AVAILABLE.value, RoomStatus.BOOKED.value
        ):
            logger.room_state_changed(room_id, RoomStatus.AVAILABLE.value, RoomStatus.BOOKED.value)
            return

        # The guard failed; tell "missing" apart from "taken"
        if self.store.find_room(room_id) is None:
            raise RoomNotFound(f"Room {room_id} not found")
        raise RoomNoLongerAvailable(f"Room {room_id} is no longer available")

    def release(self, room_id: str) -> bool:
        """
        Transition Booked -> Available.

        Returns False when there was nothing to release (room deleted or
        already Available); that is not an error.
        """
        released = self.store.conditional_update_room_state(
            room_id, RoomStatus.BOOKED.value, RoomStatus.AVAILABLE.value
        )
        if released:
            logger.room_state_changed(room_id, RoomStatus.BOOKED.value, RoomStatus.AVAILABLE.value)
        else:
            logger.info(f"Release of room {room_id} was a no-op")
        return released
