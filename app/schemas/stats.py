from pydantic import BaseModel, Field
from typing import List, Optional, Union
from datetime import datetime

from ..services.revenue_aggregator import RevenueSnapshot


class RevenueStatsResponse(BaseModel):
    """
    Dashboard payload. Field names follow the dashboard client
    (camelCase); money is rendered as JSON numbers.
    """
    totalBookings: int
    totalSales: float
    chartData: List[List[Union[str, float]]]
    totalUsers: Optional[int] = None
    totalRooms: Optional[int] = None
    hostSince: Optional[datetime] = None
    guestSince: Optional[datetime] = None
    malformedPrices: int = Field(0, description="Bookings whose price was counted as 0")

    @classmethod
    def from_snapshot(cls, snapshot: RevenueSnapshot) -> "RevenueStatsResponse":
        header, *rows = snapshot.chart_data
        return cls(
            totalBookings=snapshot.total_bookings,
            totalSales=float(snapshot.total_sales),
            chartData=[list(header)] + [[label, float(price)] for label, price in rows],
            totalUsers=snapshot.total_users,
            totalRooms=snapshot.total_rooms,
            hostSince=snapshot.host_since,
            guestSince=snapshot.guest_since,
            malformedPrices=snapshot.malformed_prices,
        )
