from datetime import datetime
from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from quizbank.config import Config
from quizbank.core.core import Service
from quizbank.core.db import store_operation
from quizbank.core.modules.account.models import HasSessions
from quizbank.core.modules.session.models import RefreshToken, Session
from quizbank.core.security import random_opaque_token
from quizbank.errors import AuthenticationError, AuthFailure, NotFoundError
from quizbank.utils import now

logger = structlog.get_logger(__name__)


class SessionService(Service):
    """Refresh-token sessions stored inside account documents.

    Every write is a single atomic update on the account, so concurrent logins
    of one account never overwrite each other's sessions.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        super().__init__(database, config)
        self._collection = database.get_collection("accounts")

    async def create_session(self, account_id: UUID, timeout: float | None = None) -> RefreshToken:
        """Start a new session for the account and return its refresh token."""
        created_at = now()
        session = Session(
            token=random_opaque_token(),
            expires_at=created_at + self.config.refresh_token_ttl,
            created_at=created_at,
        )
        await self.add_session(account_id, session, timeout)
        logger.info("session_created", account_id=str(account_id), expires_at=session.expires_at.isoformat())
        return RefreshToken(session.token)

    async def add_session(self, account_id: UUID, session: Session, timeout: float | None = None) -> None:
        """Append session to the account, evicting the oldest beyond max_sessions_per_account."""
        with store_operation("add_session", timeout):
            result = await self._collection.update_one(
                {"_id": account_id},
                {
                    "$push": {
                        "sessions": {
                            "$each": [session.model_dump()],
                            "$slice": -self.config.max_sessions_per_account,
                        }
                    }
                },
            )
        if result.matched_count == 0:
            raise NotFoundError(f"Account '{account_id}' not found")

    def find_session(self, holder: HasSessions, token: str) -> Session | None:
        """Return the first session with this token, expired or not."""
        return next((s for s in holder.sessions if s.token == token), None)

    def verify_session(self, holder: HasSessions, token: str, at: datetime | None = None) -> Session:
        """Return the matching session if it is still valid.

        Raises:
            AuthenticationError: SESSION_NOT_FOUND if no session has this token,
                SESSION_EXPIRED if the matching one has expired
        """
        session = self.find_session(holder, token)
        if session is None:
            raise AuthenticationError(AuthFailure.SESSION_NOT_FOUND)
        if session.is_expired(at):
            raise AuthenticationError(AuthFailure.SESSION_EXPIRED)
        return session

    async def revoke_session(self, account_id: UUID, token: str, timeout: float | None = None) -> bool:
        """Remove one session. Returns False if there was nothing to remove."""
        with store_operation("revoke_session", timeout):
            result = await self._collection.update_one({"_id": account_id}, {"$pull": {"sessions": {"token": token}}})
        revoked = result.modified_count > 0
        logger.info("session_revoked", account_id=str(account_id), revoked=revoked)
        return revoked

    async def revoke_all_sessions(self, account_id: UUID, timeout: float | None = None) -> int:
        """Remove every session of the account and return how many there were."""
        with store_operation("revoke_all_sessions", timeout):
            before = await self._collection.find_one_and_update(
                {"_id": account_id}, {"$set": {"sessions": []}}, return_document=ReturnDocument.BEFORE
            )
        if before is None:
            raise NotFoundError(f"Account '{account_id}' not found")
        revoked = len(before.get("sessions", []))
        logger.info("all_sessions_revoked", account_id=str(account_id), revoked=revoked)
        return revoked
