import asyncio
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError

from quizbank.config import Config
from quizbank.core.core import Service
from quizbank.core.db import store_operation
from quizbank.core.modules.account.models import Account
from quizbank.core.modules.account.validators import validate_email, validate_password
from quizbank.core.security import hash_secret, random_opaque_token, verify_secret
from quizbank.errors import DuplicateEmailError, InvalidCredentialsError, NotFoundError
from quizbank.utils import normalize_email

logger = structlog.get_logger(__name__)


class AccountService(Service):
    """Creates accounts and resolves them by credentials or id.

    Accounts are always read from the database, sessions live inside them.
    """

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        super().__init__(database, config)
        self._collection = database.get_collection("accounts")
        self._dummy_hash: str | None = None

    async def on_start(self) -> None:
        """Create indexes and the dummy hash used for unknown emails."""
        await self._collection.create_index([("email", 1)], unique=True)
        self._dummy_hash = await asyncio.to_thread(hash_secret, random_opaque_token(), self.config.bcrypt_rounds)
        logger.debug("account_service_started")

    async def create_account(self, email: str, password: str, timeout: float | None = None) -> Account:
        """Create account with normalized email and hashed password."""
        email = normalize_email(email)
        validate_email(email)
        validate_password(password)

        password_hash = await asyncio.to_thread(hash_secret, password, self.config.bcrypt_rounds)
        account = Account(email=email, password_hash=password_hash)
        try:
            with store_operation("create_account", timeout):
                await self._collection.insert_one(account.to_mongo())
        except DuplicateKeyError as e:
            raise DuplicateEmailError from e

        logger.info("account_created", account_id=str(account.id))
        return account

    async def find_by_credentials(self, email: str, password: str, timeout: float | None = None) -> Account:
        """Return the account for email/password or raise InvalidCredentialsError.

        An unknown email still pays for a bcrypt check so both failures take the same time.
        """
        with store_operation("find_by_credentials", timeout):
            doc = await self._collection.find_one({"email": normalize_email(email)})

        if doc is None:
            await asyncio.to_thread(verify_secret, password, await self._get_dummy_hash())
            logger.info("login_failed", reason="unknown_email")
            raise InvalidCredentialsError

        account = Account.model_validate(doc)
        if not await asyncio.to_thread(verify_secret, password, account.password_hash):
            logger.info("login_failed", reason="wrong_password", account_id=str(account.id))
            raise InvalidCredentialsError
        return account

    async def find_account(self, account_id: UUID, timeout: float | None = None) -> Account | None:
        """Get account by ID, or None if it does not exist."""
        with store_operation("find_account", timeout):
            doc = await self._collection.find_one({"_id": account_id})
        return Account.model_validate(doc) if doc is not None else None

    async def get_account(self, account_id: UUID, timeout: float | None = None) -> Account:
        """Get account by ID."""
        account = await self.find_account(account_id, timeout)
        if account is None:
            raise NotFoundError(f"Account '{account_id}' not found")
        return account

    async def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = await asyncio.to_thread(hash_secret, random_opaque_token(), self.config.bcrypt_rounds)
        return self._dummy_hash
