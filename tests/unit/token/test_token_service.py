"""Tests for access token issuing."""

from datetime import UTC, datetime, timedelta
from uuid import UUID

import pytest

from quizbank.core.security import InvalidSignatureError, TokenExpiredError, sign_token

ACCOUNT_ID = UUID("87654321-4321-8765-4321-876543218765")
ISSUED_AT = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)


class _Identity:
    id = ACCOUNT_ID


class TestAccessTokens:
    @pytest.mark.asyncio
    async def test_token_resolves_to_account_id(self, core):
        token = core.services.token.generate_access_token(_Identity(), at=ISSUED_AT)
        assert core.services.token.read_access_token(token, at=ISSUED_AT) == ACCOUNT_ID

    @pytest.mark.asyncio
    async def test_token_lives_for_access_ttl(self, core):
        token = core.services.token.generate_access_token(_Identity(), at=ISSUED_AT)
        ttl = timedelta(minutes=15)

        assert core.services.token.read_access_token(token, at=ISSUED_AT + ttl - timedelta(seconds=1)) == ACCOUNT_ID
        with pytest.raises(TokenExpiredError):
            core.services.token.read_access_token(token, at=ISSUED_AT + ttl)

    @pytest.mark.asyncio
    async def test_token_without_subject_rejected(self, core):
        token = sign_token({"scope": "all"}, core.config.jwt_secret, timedelta(minutes=1), now=ISSUED_AT)
        with pytest.raises(InvalidSignatureError):
            core.services.token.read_access_token(token, at=ISSUED_AT)

    @pytest.mark.asyncio
    async def test_token_with_non_uuid_subject_rejected(self, core):
        token = sign_token({"sub": "admin"}, core.config.jwt_secret, timedelta(minutes=1), now=ISSUED_AT)
        with pytest.raises(InvalidSignatureError):
            core.services.token.read_access_token(token, at=ISSUED_AT)

    @pytest.mark.asyncio
    async def test_generation_does_not_touch_database(self, core, accounts):
        calls = accounts.calls
        core.services.token.generate_access_token(_Identity())
        assert accounts.calls == calls
