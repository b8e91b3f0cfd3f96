from fastapi import APIRouter, Request, Response

from ..config import settings
from ..schemas.user import MessageResponse, TokenRequest
from ..utils.rate_limiter import limiter, get_rate_limit
from ..utils.security import create_access_token

router = APIRouter(tags=["Session"])


def _cookie_options() -> dict:
    return {
        "httponly": True,
        "secure": settings.is_production,
        "samesite": "none" if settings.is_production else "strict",
        "path": "/",
    }


@router.post("/jwt", response_model=MessageResponse)
@limiter.limit(get_rate_limit("token_issue"))
def issue_token(request: Request, response: Response, body: TokenRequest):
    """Issue the session cookie for an already-authenticated client"""
    # the email was verified by the client's identity provider; this only wraps it in a session
    token = create_access_token({"email": body.email, "name": body.name})
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=settings.access_token_expire_days * 86400,
        **_cookie_options()
    )
    return MessageResponse(success=True)


@router.get("/logout", response_model=MessageResponse)
def logout(response: Response):
    response.delete_cookie(settings.cookie_name, **_cookie_options())
    return MessageResponse(success=True)
