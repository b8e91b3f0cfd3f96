from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from ..config import settings
from ..database import get_db
from ..models.user import User, UserRole
from ..schemas.identity import Identity
from ..services.ledger_store import LedgerStore
from ..services.payment_adapter import PaymentAdapter, get_payment_adapter
from ..services.booking_workflow import BookingWorkflow
from ..services.revenue_aggregator import RevenueAggregator
from .db_helpers import store_errors
from .logging_config import user_email_var
from .security import verify_access_token


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get(settings.cookie_name)
    if token:
        return token
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header[7:].strip()
    return None


def get_current_identity(
    request: Request,
    db: Session = Depends(get_db)
) -> Identity:
    """Verified caller identity from the session cookie (or Bearer header)"""
    token = _extract_token(request)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized access"
        )

    payload = verify_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="unauthorized access"
        )

    email = payload["email"]
    with store_errors("get_current_identity"):
        user = db.query(User).filter(User.email == email).first()
    user_email_var.set(email)

    if user is None:
        return Identity(email=email, name=payload.get("name"))
    return Identity(email=user.email, role=UserRole(user.role), name=user.name, image=user.image)


def require_role(*roles: UserRole):
    """Dependency factory: reject callers whose role is not in roles"""
    def checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="forbidden access"
            )
        return identity
    return checker


def get_ledger_store(db: Session = Depends(get_db)) -> LedgerStore:
    return LedgerStore(db)


def get_booking_workflow(
    store: LedgerStore = Depends(get_ledger_store),
    payments: PaymentAdapter = Depends(get_payment_adapter)
) -> BookingWorkflow:
    return BookingWorkflow(store, payments)


def get_revenue_aggregator(store: LedgerStore = Depends(get_ledger_store)) -> RevenueAggregator:
    return RevenueAggregator(store)
