"""Session management models."""

from datetime import datetime
from typing import NewType

from pydantic import BaseModel, Field

from quizbank.core.security import is_expired
from quizbank.utils import now

RefreshToken = NewType("RefreshToken", str)
AccessToken = NewType("AccessToken", str)


class Session(BaseModel):
    """One logged-in device of an account, embedded in the account document.

    Never mutated after creation; removed by revocation or capacity eviction.
    """

    token: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=now)

    def is_expired(self, at: datetime | None = None) -> bool:
        return is_expired(self.expires_at, at or now())


class AuthTokens(BaseModel):
    """Token pair handed out on signup and login."""

    access_token: AccessToken
    refresh_token: RefreshToken
