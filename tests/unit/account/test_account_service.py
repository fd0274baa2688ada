"""Tests for account creation and credential lookup."""

import threading
from uuid import uuid4

import pytest

from quizbank.core import security
from quizbank.core.modules.account import service as account_service
from quizbank.core.security import verify_secret
from quizbank.errors import DuplicateEmailError, InvalidCredentialsError, NotFoundError, ValidationError


class TestCreateAccount:
    @pytest.mark.asyncio
    async def test_creates_account_with_hashed_password(self, core, accounts):
        account = await core.services.account.create_account("a@x.com", "hunter12")

        assert account.email == "a@x.com"
        assert account.password_hash != "hunter12"
        assert verify_secret("hunter12", account.password_hash)
        assert account.sessions == []
        assert accounts.docs[0]["_id"] == account.id

    @pytest.mark.asyncio
    async def test_email_is_normalized(self, core):
        account = await core.services.account.create_account("  A@X.Com ", "hunter12")
        assert account.email == "a@x.com"

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self, core):
        await core.services.account.create_account("a@x.com", "hunter12")
        with pytest.raises(DuplicateEmailError):
            await core.services.account.create_account("A@x.com", "different1")

    @pytest.mark.asyncio
    async def test_invalid_email_rejected(self, core, accounts):
        with pytest.raises(ValidationError, match="Invalid email"):
            await core.services.account.create_account("not-an-email", "hunter12")
        assert accounts.docs == []

    @pytest.mark.asyncio
    async def test_short_password_rejected(self, core):
        with pytest.raises(ValidationError, match="at least 8 characters"):
            await core.services.account.create_account("a@x.com", "short")


class TestFindByCredentials:
    """Tests for login lookup."""

    @pytest.mark.asyncio
    async def test_correct_credentials(self, core):
        created = await core.services.account.create_account("a@x.com", "hunter12")
        account = await core.services.account.find_by_credentials("A@X.COM", "hunter12")
        assert account.id == created.id

    @pytest.mark.asyncio
    async def test_wrong_password_and_unknown_email_look_the_same(self, core):
        """Test that neither failure tells which half of the credentials was wrong."""
        await core.services.account.create_account("a@x.com", "hunter12")

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            await core.services.account.find_by_credentials("a@x.com", "hunter13")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            await core.services.account.find_by_credentials("b@x.com", "hunter12")

        assert type(wrong_password.value) is type(unknown_email.value)
        assert str(wrong_password.value) == str(unknown_email.value)

    @pytest.mark.asyncio
    async def test_dummy_hash_built_off_event_loop_when_missing(self, core, monkeypatch):
        hashing_threads = []

        def recording_hash(plaintext, rounds=12):
            hashing_threads.append(threading.current_thread())
            return security.hash_secret(plaintext, rounds)

        monkeypatch.setattr(account_service, "hash_secret", recording_hash)
        core.services.account._dummy_hash = None

        with pytest.raises(InvalidCredentialsError):
            await core.services.account.find_by_credentials("b@x.com", "hunter12")

        assert len(hashing_threads) == 1
        assert hashing_threads[0] is not threading.main_thread()
        assert core.services.account._dummy_hash is not None


class TestGetAccount:
    @pytest.mark.asyncio
    async def test_get_existing(self, core):
        created = await core.services.account.create_account("a@x.com", "hunter12")
        assert (await core.services.account.get_account(created.id)).email == "a@x.com"

    @pytest.mark.asyncio
    async def test_get_missing(self, core):
        with pytest.raises(NotFoundError):
            await core.services.account.get_account(uuid4())
        assert await core.services.account.find_account(uuid4()) is None
