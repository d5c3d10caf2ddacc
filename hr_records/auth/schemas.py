"""Auth Pydantic v2 schemas."""


from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class AuthSession(BaseModel):
    """The externally issued session, as read from its access token."""

    user_id: str
    email: Optional[str] = None
    role: Optional[str] = None
    expires_at: Optional[datetime] = None
