"""
Revenue dashboards.

Each call recomputes the snapshot from the ledger; see
services/revenue_aggregator.py for the fold rules.
"""

from fastapi import APIRouter, Depends, Request

from ..models.user import UserRole
from ..schemas.identity import Identity
from ..schemas.stats import RevenueStatsResponse
from ..services.revenue_aggregator import RevenueAggregator, RevenueScope
from ..utils.dependencies import get_current_identity, get_revenue_aggregator, require_role
from ..utils.rate_limiter import limiter, get_rate_limit

router = APIRouter(prefix="/api/stats", tags=["Statistics"])


@router.get("/admin", response_model=RevenueStatsResponse)
@limiter.limit(get_rate_limit("report"))
def admin_stats(
    request: Request,
    admin: Identity = Depends(require_role(UserRole.ADMIN)),
    aggregator: RevenueAggregator = Depends(get_revenue_aggregator)
):
    """All bookings, plus user and room totals"""
    return RevenueStatsResponse.from_snapshot(aggregator.aggregate(RevenueScope.admin()))


@router.get("/host", response_model=RevenueStatsResponse)
@limiter.limit(get_rate_limit("report"))
def host_stats(
    request: Request,
    host: Identity = Depends(require_role(UserRole.HOST)),
    aggregator: RevenueAggregator = Depends(get_revenue_aggregator)
):
    """Bookings on the caller's rooms, room count and hostSince"""
    return RevenueStatsResponse.from_snapshot(aggregator.aggregate(RevenueScope.host(host.email)))


@router.get("/guest", response_model=RevenueStatsResponse)
@limiter.limit(get_rate_limit("report"))
def guest_stats(
    request: Request,
    guest: Identity = Depends(get_current_identity),
    aggregator: RevenueAggregator = Depends(get_revenue_aggregator)
):
    """The caller's own spending"""
    return RevenueStatsResponse.from_snapshot(aggregator.aggregate(RevenueScope.guest(guest.email)))
