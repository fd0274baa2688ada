from datetime import datetime
from uuid import UUID

from quizbank.core.core import Service
from quizbank.core.modules.account.models import IssuesTokens
from quizbank.core.modules.session.models import AccessToken
from quizbank.core.security import InvalidSignatureError, sign_token, verify_token


class TokenService(Service):
    """Mints and reads stateless access tokens. Never touches the database."""

    def generate_access_token(self, account: IssuesTokens, at: datetime | None = None) -> AccessToken:
        return AccessToken(
            sign_token({"sub": str(account.id)}, self.config.jwt_secret, self.config.access_token_ttl, now=at)
        )

    def read_access_token(self, token: str, at: datetime | None = None) -> UUID:
        """Verify token and return the account id it was issued for.

        Raises:
            InvalidSignatureError: Bad signature or malformed payload
            TokenExpiredError: Token is past its expiry
        """
        payload = verify_token(token, self.config.jwt_secret, now=at)
        try:
            return UUID(payload["sub"])
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidSignatureError("Token has no valid subject") from e
