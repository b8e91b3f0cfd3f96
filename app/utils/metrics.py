"""
Prometheus Metrics

In-process counters and histograms rendered in the Prometheus text format
at /metrics:
- HTTP request metrics (count, duration, status codes)
- Booking engine metrics (bookings, conflicts, cancellations, authorizations)
- Ledger data-quality metrics (malformed prices)

Values live in this process only; each worker exposes its own.
"""

from typing import Dict, List, Tuple
from collections import defaultdict
from threading import Lock


class _Metric:
    kind = ""

    def __init__(self, name: str, description: str, labels: tuple = ()):
        self.name = name
        self.description = description
        self.labels = labels
        self._lock = Lock()

    def _key(self, label_values: dict) -> tuple:
        return tuple(str(label_values.get(label, '')) for label in self.labels)

    def _selector(self, key: tuple, **more) -> str:
        pairs = list(zip(self.labels, key)) + list(more.items())
        if not pairs:
            return ""
        return "{" + ",".join(f'{k}="{v}"' for k, v in pairs) + "}"

    def header(self) -> List[str]:
        return [f"# HELP {self.name} {self.description}", f"# TYPE {self.name} {self.kind}"]


class Counter(_Metric):
    """Monotonic counter, one series per label combination"""
    kind = "counter"

    def __init__(self, name: str, description: str, labels: tuple = ()):
        super().__init__(name, description, labels)
        self._values: Dict[tuple, float] = defaultdict(float)

    def inc(self, value: float = 1, **label_values):
        key = self._key(label_values)
        with self._lock:
            self._values[key] += value

    def get_all(self) -> Dict[tuple, float]:
        with self._lock:
            return dict(self._values)

    def reset(self):
        with self._lock:
            self._values.clear()

    def render(self) -> List[str]:
        lines = self.header()
        for key, value in self.get_all().items():
            lines.append(f"{self.name}{self._selector(key)} {value}")
        return lines


class Histogram(_Metric):
    """Cumulative-bucket histogram"""
    kind = "histogram"

    DEFAULT_BUCKETS = (0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)

    def __init__(self, name: str, description: str, labels: tuple = (), buckets: tuple = None):
        super().__init__(name, description, labels)
        self.buckets = tuple(buckets or self.DEFAULT_BUCKETS)
        # label key -> (per-bucket counts, [sum, count])
        self._series: Dict[tuple, Tuple[List[int], List[float]]] = {}

    def observe(self, value: float, **label_values):
        key = self._key(label_values)
        with self._lock:
            counts, totals = self._series.setdefault(key, ([0] * len(self.buckets), [0.0, 0]))
            for i, bound in enumerate(self.buckets):
                if value <= bound:
                    counts[i] += 1
            totals[0] += value
            totals[1] += 1

    def get_all(self) -> Dict[tuple, dict]:
        with self._lock:
            return {
                key: {"buckets": dict(zip(self.buckets, counts)), "sum": totals[0], "count": totals[1]}
                for key, (counts, totals) in self._series.items()
            }

    def render(self) -> List[str]:
        lines = self.header()
        for key, data in self.get_all().items():
            for bound, count in data["buckets"].items():
                lines.append(f"{self.name}_bucket{self._selector(key, le=bound)} {count}")
            lines.append(f'{self.name}_bucket{self._selector(key, le="+Inf")} {data["count"]}')
            lines.append(f"{self.name}_sum{self._selector(key)} {data['sum']}")
            lines.append(f"{self.name}_count{self._selector(key)} {data['count']}")
        return lines


# ================================
# APPLICATION METRICS
# ================================

# HTTP Metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    labels=("method", "path", "status_code")
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    labels=("method", "path")
)

# Booking engine
bookings_total = Counter(
    "bookings_total",
    "Booking workflow outcomes by operation (create/cancel) and result",
    labels=("operation", "outcome")
)

booked_revenue_total = Counter(
    "booked_revenue_total",
    "Sum of prices of bookings created",
    labels=("category",)
)

payment_authorizations_total = Counter(
    "payment_authorizations_total",
    "Payment authorization attempts",
    labels=("status",)
)

payment_authorization_duration_seconds = Histogram(
    "payment_authorization_duration_seconds",
    "Payment processor round-trip in seconds",
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 20.0)
)

# Ledger data quality
malformed_prices_total = Counter(
    "malformed_prices_total",
    "Ledger bookings whose price could not be summed"
)

REGISTRY = (
    http_requests_total,
    http_request_duration_seconds,
    bookings_total,
    booked_revenue_total,
    payment_authorizations_total,
    payment_authorization_duration_seconds,
    malformed_prices_total,
)


def format_prometheus_metrics() -> str:
    """Every registered metric in Prometheus text format"""
    lines = []
    for metric in REGISTRY:
        lines.extend(metric.render())
    return "\n".join(lines) + "\n"


# ================================
# CONVENIENCE FUNCTIONS
# ================================

def record_http_request(method: str, path: str, status_code: int, duration: float):
    http_requests_total.inc(method=method, path=path, status_code=status_code)
    http_request_duration_seconds.observe(duration, method=method, path=path)


def record_booking_outcome(operation: str, outcome: str):
    """outcome is "success" or the error class name"""
    bookings_total.inc(operation=operation, outcome=outcome)


def record_booking_created(category: str, price: float):
    record_booking_outcome("create", "success")
    booked_revenue_total.inc(price, category=category or "")


def record_authorization(success: bool, duration: float):
    payment_authorizations_total.inc(status="success" if success else "error")
    payment_authorization_duration_seconds.observe(duration)


def record_malformed_price():
    malformed_prices_total.inc()
