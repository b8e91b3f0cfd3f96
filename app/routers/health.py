"""
Health Check Endpoints

- /health/live  - Liveness check (is process running)
- /health/ready - Readiness check (can the ledger store be reached)
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from datetime import datetime, timezone
import time

from ..config import settings
from ..database import get_db
from ..utils.db_helpers import is_postgres

router = APIRouter(prefix="/health", tags=["Health"])


def get_db_health(db: Session) -> dict:
    """Check database connectivity and latency"""
    try:
        start = time.time()
        db.execute(text("SELECT 1"))
        latency_ms = (time.time() - start) * 1000
        return {
            "status": "up",
            "latency_ms": round(latency_ms, 2),
            "type": "postgresql" if is_postgres(db) else "sqlite"
        }
    except SQLAlchemyError as e:
        return {
            "status": "down",
            "error": str(e)[:100]
        }


@router.get("/live")
def liveness():
    return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/ready")
def readiness(db: Session = Depends(get_db)):
    database = get_db_health(db)
    body = {
        "status": "ready" if database["status"] == "up" else "not_ready",
        "database": database,
        "payments": "configured" if settings.has_payment_config else "not_configured",
    }
    return JSONResponse(status_code=200 if database["status"] == "up" else 503, content=body)
