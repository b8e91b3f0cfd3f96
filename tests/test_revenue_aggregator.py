"""
Tests for the revenue aggregator

Covers the fold (totals, chart series, malformed prices) and the three
dashboard scopes.
"""

import pytest
from datetime import date, datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

from app.models.user import UserRole
from app.services.ledger_store import BookingFilter
from app.services.revenue_aggregator import (
    CHART_HEADER,
    RevenueAggregator,
    RevenueScope,
    ScopeKind,
    day_label,
    parse_price,
)
from app.utils import metrics

from conftest import make_booking, make_room, make_user


def stub_store(bookings):
    store = MagicMock()
    store.query_bookings.return_value = bookings
    store.count_users.return_value = 0
    store.count_rooms.return_value = 0
    store.find_user.return_value = None
    return store


class TestHelpers:

    def test_day_label_is_day_slash_month(self):
        assert day_label(date(2026, 6, 3)) == "3/6"
        assert day_label(date(2026, 12, 25)) == "25/12"

    def test_day_label_accepts_iso_strings(self):
        assert day_label("2026-06-04T00:00:00Z") == "4/6"

    @pytest.mark.parametrize("raw,expected", [
        (Decimal("25.00"), Decimal("25.00")),
        ("40.50", Decimal("40.50")),
        (10, Decimal("10")),
        (None, None),
        ("abc", None),
        (True, None),
        ("NaN", None),
    ])
    def test_parse_price(self, raw, expected):
        assert parse_price(raw) == expected


class TestFold:

    def test_admin_scenario(self, db, store):
        make_booking(db, date=date(2026, 6, 3), price="25.00")
        make_booking(db, date=date(2026, 6, 3), price="40.50")
        make_booking(db, date=date(2026, 6, 4), price="10.00")

        snapshot = RevenueAggregator(store).aggregate(RevenueScope.admin())

        assert snapshot.total_bookings == 3
        assert snapshot.total_sales == Decimal("75.50")
        assert snapshot.chart_data == [
            CHART_HEADER,
            ["3/6", Decimal("25.00")],
            ["3/6", Decimal("40.50")],
            ["4/6", Decimal("10.00")],
        ]
        assert snapshot.malformed_prices == 0

    def test_empty_ledger(self, store):
        snapshot = RevenueAggregator(store).aggregate(RevenueScope.admin())

        assert snapshot.total_bookings == 0
        assert snapshot.total_sales == Decimal("0.00")
        assert snapshot.chart_data == [CHART_HEADER]

    def test_series_keeps_fetch_order(self):
        bookings = [
            SimpleNamespace(id="b1", date=date(2026, 6, 9), price=Decimal("5")),
            SimpleNamespace(id="b2", date=date(2026, 6, 1), price=Decimal("7")),
        ]

        snapshot = RevenueAggregator(stub_store(bookings)).aggregate(RevenueScope.admin())

        assert [row[0] for row in snapshot.chart_data[1:]] == ["9/6", "1/6"]

    def test_malformed_price_counts_as_zero(self):
        bookings = [
            SimpleNamespace(id="b1", date=date(2026, 6, 3), price=Decimal("25.00")),
            SimpleNamespace(id="b2", date=date(2026, 6, 3), price="twenty"),
            SimpleNamespace(id="b3", date=date(2026, 6, 4), price=None),
        ]
        before = metrics.malformed_prices_total.get_all().get((), 0)

        snapshot = RevenueAggregator(stub_store(bookings)).aggregate(RevenueScope.admin())

        assert snapshot.total_bookings == 3
        assert snapshot.total_sales == Decimal("25.00")
        assert snapshot.malformed_prices == 2
        assert snapshot.chart_data[2] == ["3/6", Decimal("0")]
        assert metrics.malformed_prices_total.get_all()[()] == before + 2

    def test_aggregate_is_read_only(self):
        store = stub_store([])

        RevenueAggregator(store).aggregate(RevenueScope.admin())

        store.commit.assert_not_called()
        store.conditional_update_room_state.assert_not_called()
        store.insert_booking.assert_not_called()
        store.delete_booking.assert_not_called()


class TestScopes:

    def test_scope_filters(self):
        assert RevenueScope.admin().booking_filter() == BookingFilter.all()
        assert RevenueScope.host("h@x.io").booking_filter() == BookingFilter.for_host("h@x.io")
        assert RevenueScope.guest("g@x.io").booking_filter() == BookingFilter.for_guest("g@x.io")
        assert RevenueScope.host("h@x.io").kind == ScopeKind.HOST

    def test_admin_counts_users_and_rooms(self, db, store):
        make_user(db, "a@x.io")
        make_user(db, "b@x.io")
        make_room(db)

        snapshot = RevenueAggregator(store).aggregate(RevenueScope.admin())

        assert snapshot.total_users == 2
        assert snapshot.total_rooms == 1
        assert snapshot.host_since is None

    def test_host_sees_only_own_bookings(self, db, store):
        joined = datetime(2025, 1, 15, 9, 30)
        make_user(db, "h1@x.io", role=UserRole.HOST, created_at=joined)
        make_room(db, host_email="h1@x.io")
        make_room(db, host_email="h1@x.io")
        make_room(db, host_email="h2@x.io")
        make_booking(db, host_email="h1@x.io", price="25.00")
        make_booking(db, host_email="h2@x.io", price="99.00")
        make_booking(db, host_email="h1@x.io", price="10.00", date=date(2026, 6, 4))

        snapshot = RevenueAggregator(store).aggregate(RevenueScope.host("h1@x.io"))

        assert snapshot.total_bookings == 2
        assert snapshot.total_sales == Decimal("35.00")
        assert snapshot.total_rooms == 2
        assert snapshot.host_since == joined
        assert snapshot.total_users is None

    def test_guest_sees_own_spending(self, db, store):
        joined = datetime(2025, 3, 1)
        make_user(db, "g1@x.io", created_at=joined)
        make_booking(db, guest_email="g1@x.io", price="40.50")
        make_booking(db, guest_email="g2@x.io", price="12.00")

        snapshot = RevenueAggregator(store).aggregate(RevenueScope.guest("g1@x.io"))

        assert snapshot.total_bookings == 1
        assert snapshot.total_sales == Decimal("40.50")
        assert snapshot.guest_since == joined
        assert snapshot.total_rooms is None

    def test_host_without_user_record(self, db, store):
        snapshot = RevenueAggregator(store).aggregate(RevenueScope.host("ghost@x.io"))

        assert snapshot.total_bookings == 0
        assert snapshot.host_since is None
