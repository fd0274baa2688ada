from typing import Annotated, cast
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader

from quizbank.app import App
from quizbank.core.modules.account.models import Account

ACCESS_TOKEN_HEADER = "x-access-token"
REFRESH_TOKEN_HEADER = "x-refresh-token"
ACCOUNT_ID_HEADER = "x-account-id"

# Security schemes
access_token_scheme = APIKeyHeader(name=ACCESS_TOKEN_HEADER, scheme_name="AccessToken", auto_error=False)
refresh_token_scheme = APIKeyHeader(name=REFRESH_TOKEN_HEADER, scheme_name="RefreshToken", auto_error=False)
account_id_scheme = APIKeyHeader(name=ACCOUNT_ID_HEADER, scheme_name="AccountId", auto_error=False)


async def get_app(request: Request) -> App:
    return cast(App, request.app.state.app)


async def get_account_id(
    app: Annotated[App, Depends(get_app)],
    access_token: Annotated[str | None, Depends(access_token_scheme)] = None,
) -> UUID:
    """Resolve the calling account from the x-access-token header, without a database lookup."""
    return app.authenticate_access_token(access_token)


async def get_session_account(
    app: Annotated[App, Depends(get_app)],
    account_id: Annotated[str | None, Depends(account_id_scheme)] = None,
    refresh_token: Annotated[str | None, Depends(refresh_token_scheme)] = None,
) -> Account:
    """Resolve the calling account from x-account-id and x-refresh-token against its stored sessions."""
    return await app.authenticate_session(account_id, refresh_token)


# Type aliases for dependencies
AppDep = Annotated[App, Depends(get_app)]
AccountIdDep = Annotated[UUID, Depends(get_account_id)]
SessionAccountDep = Annotated[Account, Depends(get_session_account)]
RefreshTokenDep = Annotated[str | None, Depends(refresh_token_scheme)]
