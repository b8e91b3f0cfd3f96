from pydantic import BaseModel
from typing import Optional

from ..models.user import UserRole


class Identity(BaseModel):
    """
    Verified caller identity.

    Produced by the session layer and passed explicitly into every booking and
    revenue call; the engine trusts it and never re-checks credentials.
    """
    email: str
    role: UserRole = UserRole.GUEST
    name: Optional[str] = None
    image: Optional[str] = None
