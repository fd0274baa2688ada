from datetime import datetime
from uuid import UUID

import structlog

from quizbank.core.core import Service
from quizbank.core.modules.account.models import Account
from quizbank.core.security import TokenError
from quizbank.errors import AuthenticationError, AuthFailure

logger = structlog.get_logger(__name__)


class AccessService(Service):
    """Request gates: stateless access-token check and stateful session check."""

    def authenticate_access_token(self, access_token: str | None, at: datetime | None = None) -> UUID:
        """Return the account id of a valid access token. No database access."""
        if not access_token:
            logger.info("access_auth_failed", reason=AuthFailure.MISSING_TOKEN)
            raise AuthenticationError(AuthFailure.MISSING_TOKEN)

        try:
            return self.core.services.token.read_access_token(access_token, at)
        except TokenError as e:
            # Cause is logged only, the client sees one reason for both
            logger.info("access_auth_failed", reason=AuthFailure.INVALID_OR_EXPIRED_TOKEN, cause=type(e).__name__)
            raise AuthenticationError(AuthFailure.INVALID_OR_EXPIRED_TOKEN) from e

    async def authenticate_session(
        self, account_id: str | None, refresh_token: str | None, at: datetime | None = None
    ) -> Account:
        """Return the account whose session matches refresh_token and has not expired."""
        if not account_id or not refresh_token:
            logger.info("session_auth_failed", reason=AuthFailure.MISSING_CREDENTIALS)
            raise AuthenticationError(AuthFailure.MISSING_CREDENTIALS)

        try:
            parsed_id = UUID(account_id)
        except ValueError:
            logger.info("session_auth_failed", reason=AuthFailure.SESSION_NOT_FOUND, detail="malformed_account_id")
            raise AuthenticationError(AuthFailure.SESSION_NOT_FOUND) from None

        account = await self.core.services.account.find_account(parsed_id)
        if account is None:
            logger.info("session_auth_failed", reason=AuthFailure.SESSION_NOT_FOUND, detail="unknown_account")
            raise AuthenticationError(AuthFailure.SESSION_NOT_FOUND)

        try:
            self.core.services.session.verify_session(account, refresh_token, at)
        except AuthenticationError as e:
            logger.info("session_auth_failed", reason=e.reason, account_id=account_id)
            raise
        return account
