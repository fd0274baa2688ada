from datetime import datetime
from typing import Protocol
from uuid import UUID

from pydantic import BaseModel, Field

from quizbank.core.db import MongoModel
from quizbank.core.modules.session.models import Session
from quizbank.utils import now


class IssuesTokens(Protocol):
    """Anything an access token can be minted for."""

    @property
    def id(self) -> UUID: ...


class HasSessions(Protocol):
    """Anything holding an ordered list of refresh-token sessions."""

    @property
    def sessions(self) -> list[Session]: ...


class Account(MongoModel):
    """Account domain model with credentials and active sessions.

    Indexed on email - unique.
    """

    email: str  # normalized: trimmed, lowercase
    password_hash: str  # bcrypt hash
    sessions: list[Session] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=now)


class AccountView(BaseModel):
    """Account information (API representation)."""

    id: UUID = Field(..., description="Account ID")
    email: str = Field(..., description="Email address")

    @classmethod
    def from_domain(cls, account: Account) -> "AccountView":
        """Create view model from domain model."""
        return cls(id=account.id, email=account.email)
