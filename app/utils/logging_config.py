"""
Structured Logging Configuration

One line per event, either JSON (LOG_JSON=true, for log shipping) or plain
text. A filter stamps every record with the current request id and caller
email so booking and room events can be traced back to the request that
caused them.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Optional, Any, Dict
from contextvars import ContextVar

# Context variables for request tracking
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_email_var: ContextVar[str] = ContextVar('user_email', default='')

# Optional record attributes copied into the JSON payload
STRUCTURED_FIELDS = ("entity_type", "entity_id", "duration_ms", "extra_data")


class RequestContextFilter(logging.Filter):
    """Attach request_id / user to every record passing through the handler"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.user = user_email_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON object"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        for key in ("request_id", "user"):
            value = getattr(record, key, "")
            if value:
                payload[key] = value
        for key in STRUCTURED_FIELDS:
            if hasattr(record, key):
                payload["data" if key == "extra_data" else key] = getattr(record, key)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter with one helper per domain event.

    Helpers put the ids in record attributes rather than only in the
    message, so JSON output can be filtered by entity.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        kwargs.setdefault("extra", {}).update(self.extra)
        return msg, kwargs

    def log_with_context(
        self,
        level: int,
        msg: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        duration_ms: Optional[float] = None,
        **extra_data
    ):
        fields = {
            "entity_type": entity_type,
            "entity_id": entity_id,
            "duration_ms": duration_ms,
            "extra_data": extra_data or None,
        }
        self.log(level, msg, extra={k: v for k, v in fields.items() if v is not None})

    def booking_created(self, booking_id: str, room_id: str, guest_email: str, price, duration_ms: float = None):
        self.log_with_context(
            logging.INFO,
            f"Booking created: room {room_id} for {guest_email}",
            entity_type="booking",
            entity_id=booking_id,
            duration_ms=duration_ms,
            room_id=room_id,
            guest_email=guest_email,
            price=str(price)
        )

    def booking_cancelled(self, booking_id: str, room_id: str, guest_email: str):
        self.log_with_context(
            logging.INFO,
            f"Booking cancelled: room {room_id} by {guest_email}",
            entity_type="booking",
            entity_id=booking_id,
            room_id=room_id,
            guest_email=guest_email
        )

    def room_state_changed(self, room_id: str, old_state: str, new_state: str):
        self.log_with_context(
            logging.INFO,
            f"Room {old_state} -> {new_state}",
            entity_type="room",
            entity_id=room_id,
            old_state=old_state,
            new_state=new_state
        )

    def malformed_price(self, booking_id: str, raw_price: Any):
        """Data-quality signal: a ledger price that could not be summed"""
        self.log_with_context(
            logging.WARNING,
            f"Booking {booking_id} has a non-numeric price, counted as 0",
            entity_type="booking",
            entity_id=booking_id,
            raw_price=repr(raw_price)
        )

    def api_request(self, method: str, path: str, status_code: int, duration_ms: float):
        self.log_with_context(
            logging.INFO,
            f"{method} {path} {status_code}",
            duration_ms=duration_ms,
            status_code=status_code
        )


def setup_logging(
    level: str = "INFO",
    json_format: bool = True,
    include_uvicorn: bool = True
) -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        json_format: JSON lines instead of plain text
        include_uvicorn: route uvicorn's loggers through the same handler
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(
        JSONFormatter() if json_format
        else logging.Formatter('%(asctime)s %(levelname)s [%(request_id)s] %(name)s: %(message)s')
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    if include_uvicorn:
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            logging.getLogger(name).handlers = [handler]
            logging.getLogger(name).propagate = False

    # Third-party chatter
    for name in ("stripe", "sqlalchemy.engine", "urllib3"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> StructuredLogger:
    """Structured logger for a module"""
    return StructuredLogger(logging.getLogger(name), {})


def set_request_context(request_id: str, user_email: Optional[str] = None):
    request_id_var.set(request_id)
    if user_email:
        user_email_var.set(user_email)


def clear_request_context():
    request_id_var.set('')
    user_email_var.set('')
