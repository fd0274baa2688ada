from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from quizbank.core.modules.account.models import AccountView
from quizbank.core.modules.session.models import AuthTokens
from quizbank.web.deps import (
    ACCESS_TOKEN_HEADER,
    REFRESH_TOKEN_HEADER,
    AccountIdDep,
    AppDep,
    RefreshTokenDep,
    SessionAccountDep,
)
from quizbank.web.openapi import ErrorResponse

router = APIRouter(tags=["accounts"])


class CredentialsRequest(BaseModel):
    """Email and password, used for both signup and login."""

    email: str = Field(..., description="Email address (case-insensitive)")
    password: str = Field(..., description="Password, at least 8 characters")

    model_config = {"json_schema_extra": {"examples": [{"email": "a@x.com", "password": "hunter12"}]}}


class AccessTokenResponse(BaseModel):
    """Freshly issued access token."""

    access_token: str = Field(..., serialization_alias="accessToken", description="New access token")


def _set_token_headers(response: Response, tokens: AuthTokens) -> None:
    response.headers[REFRESH_TOKEN_HEADER] = tokens.refresh_token
    response.headers[ACCESS_TOKEN_HEADER] = tokens.access_token


@router.post(
    "/accounts",
    summary="Sign up",
    description="Create an account and its first session. Tokens are returned in the x-access-token and x-refresh-token headers.",
    operation_id="signup",
    responses={
        200: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid email/password or email already registered"},
    },
)
async def signup(req: CredentialsRequest, app: AppDep, response: Response) -> AccountView:
    account, tokens = await app.signup(req.email, req.password)
    _set_token_headers(response, tokens)
    return account


@router.post(
    "/accounts/login",
    summary="Log in",
    description="Authenticate with email and password. Every login starts an independent session.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        400: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(req: CredentialsRequest, app: AppDep, response: Response) -> AccountView:
    account, tokens = await app.login(req.email, req.password)
    _set_token_headers(response, tokens)
    return account


@router.get(
    "/accounts/me/access-token",
    summary="Renew access token",
    description="Exchange a valid refresh token session for a new access token. The refresh token stays the same.",
    operation_id="renewAccessToken",
    responses={
        200: {"description": "New access token"},
        401: {"model": ErrorResponse, "description": "Missing credentials, unknown or expired session"},
    },
)
async def renew_access_token(app: AppDep, account: SessionAccountDep, response: Response) -> AccessTokenResponse:
    access_token = app.renew_access_token(account)
    response.headers[ACCESS_TOKEN_HEADER] = access_token
    return AccessTokenResponse(access_token=access_token)


@router.delete(
    "/accounts/me/sessions/current",
    summary="Log out",
    description="Revoke the session of the presented refresh token.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Session revoked"},
        401: {"model": ErrorResponse, "description": "Missing credentials, unknown or expired session"},
    },
)
async def logout(app: AppDep, account: SessionAccountDep, refresh_token: RefreshTokenDep) -> None:
    # SessionAccountDep already rejected a missing token
    await app.logout(account, refresh_token or "")


@router.delete(
    "/accounts/me/sessions",
    summary="Log out everywhere",
    description="Revoke every session of the account.",
    operation_id="logoutEverywhere",
    status_code=204,
    responses={
        204: {"description": "All sessions revoked"},
        401: {"model": ErrorResponse, "description": "Missing credentials, unknown or expired session"},
    },
)
async def logout_everywhere(app: AppDep, account: SessionAccountDep) -> None:
    await app.logout_everywhere(account)


@router.get(
    "/accounts/me",
    summary="Get current account",
    description="Get the account of the presented access token.",
    operation_id="getCurrentAccount",
    responses={
        200: {"description": "Current account"},
        401: {"model": ErrorResponse, "description": "Missing, invalid or expired access token"},
        404: {"model": ErrorResponse, "description": "Account no longer exists"},
    },
)
async def get_current_account(app: AppDep, account_id: AccountIdDep) -> AccountView:
    return await app.get_current_account(account_id)
