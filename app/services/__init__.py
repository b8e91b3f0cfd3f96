# Services package
from .ledger_store import LedgerStore, BookingFilter
from .availability import AvailabilityStateMachine
from .payment_adapter import (
    AuthorizationHandle,
    PaymentAdapter,
    StripePaymentAdapter,
    get_payment_adapter,
    to_minor_units
)
from .booking_workflow import BookingWorkflow, BookingResult
from .revenue_aggregator import RevenueAggregator, RevenueScope, RevenueSnapshot, ScopeKind

__all__ = [
    "LedgerStore", "BookingFilter",
    "AvailabilityStateMachine",
    "AuthorizationHandle", "PaymentAdapter", "StripePaymentAdapter",
    "get_payment_adapter", "to_minor_units",
    "BookingWorkflow", "BookingResult",
    "RevenueAggregator", "RevenueScope", "RevenueSnapshot", "ScopeKind",
]
