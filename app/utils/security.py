"""
Session tokens.

The client authenticates with its identity provider and then exchanges the
verified email for a signed token (POST /jwt). Every protected route
verifies that token; nothing else about the caller is trusted.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from ..config import settings

TOKEN_TYPE = "access"


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a session token carrying the caller's email (and display name)"""
    now = datetime.now(timezone.utc)
    lifetime = expires_delta if expires_delta is not None else timedelta(days=settings.access_token_expire_days)
    claims = {**data, "iat": now, "exp": now + lifetime, "type": TOKEN_TYPE}
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Claims of a correctly signed, unexpired token; None otherwise"""
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def verify_access_token(token: str) -> Optional[dict]:
    claims = decode_token(token)
    if not claims or claims.get("type") != TOKEN_TYPE or not claims.get("email"):
        return None
    return claims
