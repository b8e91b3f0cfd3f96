"""
Revenue Aggregator

Derives dashboard statistics from the booking ledger on every request.
Nothing is cached, so a snapshot is always consistent with the store at read
time. The aggregator only reads.

Fold rules:
- prices are summed as Decimal
- a missing or non-numeric price counts as 0 and is logged/metered as a
  data-quality problem
- the chart series keeps the store's fetch order; labels come from the
  booking date ("day/month"), so the series is not necessarily chronological
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, List, Optional, Tuple

from ..models.booking import Booking
from ..utils.logging_config import get_logger
from ..utils.metrics import record_malformed_price
from .ledger_store import BookingFilter, LedgerStore

logger = get_logger(__name__)

CHART_HEADER = ["Day", "Price"]
ZERO = Decimal("0")
CENT = Decimal("0.01")


class ScopeKind(str, Enum):
    ADMIN = "admin"
    HOST = "host"
    GUEST = "guest"


@dataclass(frozen=True)
class RevenueScope:
    kind: ScopeKind
    email: Optional[str] = None

    @classmethod
    def admin(cls) -> "RevenueScope":
        return cls(ScopeKind.ADMIN)

    @classmethod
    def host(cls, email: str) -> "RevenueScope":
        return cls(ScopeKind.HOST, email)

    @classmethod
    def guest(cls, email: str) -> "RevenueScope":
        return cls(ScopeKind.GUEST, email)

    def booking_filter(self) -> BookingFilter:
        if self.kind == ScopeKind.HOST:
            return BookingFilter.for_host(self.email)
        if self.kind == ScopeKind.GUEST:
            return BookingFilter.for_guest(self.email)
        return BookingFilter.all()


@dataclass
class RevenueSnapshot:
    """Derived, never persisted"""
    total_bookings: int
    total_sales: Decimal
    chart_data: List[list] = field(default_factory=list)
    total_users: Optional[int] = None
    total_rooms: Optional[int] = None
    host_since: Optional[datetime] = None
    guest_since: Optional[datetime] = None
    malformed_prices: int = 0


def day_label(booking_date: Any) -> str:
    """Day/month label for a booking date, e.g. June 3rd -> "3/6" """
    if isinstance(booking_date, str):
        booking_date = date.fromisoformat(booking_date[:10])
    return f"{booking_date.day}/{booking_date.month}"


def parse_price(raw: Any) -> Optional[Decimal]:
    """Decimal value of a stored price, or None when it cannot be summed"""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = Decimal(str(raw))
    except (InvalidOperation, ValueError):
        return None
    return value if value.is_finite() else None


class RevenueAggregator:

    def __init__(self, store: LedgerStore):
        self.store = store

    def aggregate(self, scope: RevenueScope) -> RevenueSnapshot:
        bookings = self.store.query_bookings(scope.booking_filter())
        total_sales, series, malformed = self.fold(bookings)

        snapshot = RevenueSnapshot(
            total_bookings=len(bookings),
            total_sales=total_sales,
            chart_data=[list(CHART_HEADER)] + series,
            malformed_prices=malformed,
        )

        # Point queries, independent of the fold
        if scope.kind == ScopeKind.ADMIN:
            snapshot.total_users = self.store.count_users()
            snapshot.total_rooms = self.store.count_rooms()
        elif scope.kind == ScopeKind.HOST:
            snapshot.total_rooms = self.store.count_rooms(host_email=scope.email)
            host = self.store.find_user(scope.email)
            snapshot.host_since = host.created_at if host else None
        else:
            guest = self.store.find_user(scope.email)
            snapshot.guest_since = guest.created_at if guest else None

        return snapshot

    def fold(self, bookings: List[Booking]) -> Tuple[Decimal, List[list], int]:
        """Running total, (label, price) series in fetch order, malformed count"""
        total = ZERO
        series = []
        malformed = 0

        for booking in bookings:
            price = parse_price(booking.price)
            if price is None:
                malformed += 1
                record_malformed_price()
                logger.malformed_price(booking.id, booking.price)
                price = ZERO
            total += price
            series.append([day_label(booking.date), price])

        return total.quantize(CENT), series, malformed
