from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from quizbank.config import Config
from quizbank.core.core import Core
from quizbank.core.modules.account.models import Account, AccountView
from quizbank.core.modules.paper.models import Paper
from quizbank.core.modules.question.models import Question
from quizbank.core.modules.session.models import AccessToken, AuthTokens, RefreshToken


class App:
    """Facade for all application operations.

    Identity comes in already resolved: an account id from a verified access
    token, or an Account from a verified session. Every resource call is
    filtered by that identity.
    """

    def __init__(self, config: Config, database: AsyncDatabase[dict[str, Any]] | None = None) -> None:
        self._core = Core(config, database)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Authentication ===
    def authenticate_access_token(self, access_token: str | None) -> UUID:
        """Resolve the account id of a request from its access token."""
        return self._core.services.access.authenticate_access_token(access_token)

    async def authenticate_session(self, account_id: str | None, refresh_token: str | None) -> Account:
        """Resolve the account of a request from its refresh token session."""
        return await self._core.services.access.authenticate_session(account_id, refresh_token)

    async def signup(self, email: str, password: str) -> tuple[AccountView, AuthTokens]:
        """Create account and its first session."""
        account = await self._core.services.account.create_account(email, password)
        return AccountView.from_domain(account), await self._issue_tokens(account)

    async def login(self, email: str, password: str) -> tuple[AccountView, AuthTokens]:
        """Authenticate by credentials and start a new session."""
        account = await self._core.services.account.find_by_credentials(email, password)
        return AccountView.from_domain(account), await self._issue_tokens(account)

    def renew_access_token(self, account: Account) -> AccessToken:
        """Mint a new access token. The refresh token is not rotated."""
        return self._core.services.token.generate_access_token(account)

    async def logout(self, account: Account, refresh_token: str) -> None:
        """Revoke the session of the presented refresh token."""
        await self._core.services.session.revoke_session(account.id, refresh_token)

    async def logout_everywhere(self, account: Account) -> None:
        """Revoke all sessions of the account."""
        await self._core.services.session.revoke_all_sessions(account.id)

    async def get_current_account(self, account_id: UUID) -> AccountView:
        account = await self._core.services.account.get_account(account_id)
        return AccountView.from_domain(account)

    # === Papers ===
    async def get_papers(self, account_id: UUID) -> list[Paper]:
        return await self._core.services.paper.list_papers(account_id)

    async def create_paper(self, account_id: UUID, title: str) -> Paper:
        return await self._core.services.paper.create_paper(account_id, title)

    async def update_paper(self, account_id: UUID, paper_id: UUID, title: str) -> Paper:
        return await self._core.services.paper.update_paper(account_id, paper_id, title)

    async def delete_paper(self, account_id: UUID, paper_id: UUID) -> Paper:
        """Delete paper together with its questions."""
        return await self._core.services.paper.delete_paper(account_id, paper_id)

    # === Questions ===
    async def get_questions(self, account_id: UUID, paper_id: UUID) -> list[Question]:
        paper = await self._resolve_paper(account_id, paper_id)
        return await self._core.services.question.list_questions(paper.id)

    async def get_question(self, account_id: UUID, paper_id: UUID, question_id: UUID) -> Question:
        paper = await self._resolve_paper(account_id, paper_id)
        return await self._core.services.question.get_question(paper.id, question_id)

    async def create_question(self, account_id: UUID, paper_id: UUID, title: str) -> Question:
        paper = await self._resolve_paper(account_id, paper_id)
        return await self._core.services.question.create_question(paper.id, title)

    async def update_question(
        self,
        account_id: UUID,
        paper_id: UUID,
        question_id: UUID,
        title: str | None = None,
        completed: bool | None = None,
    ) -> Question:
        paper = await self._resolve_paper(account_id, paper_id)
        return await self._core.services.question.update_question(paper.id, question_id, title, completed)

    async def delete_question(self, account_id: UUID, paper_id: UUID, question_id: UUID) -> Question:
        paper = await self._resolve_paper(account_id, paper_id)
        return await self._core.services.question.delete_question(paper.id, question_id)

    # === Private helpers ===
    async def _issue_tokens(self, account: Account) -> AuthTokens:
        refresh_token: RefreshToken = await self._core.services.session.create_session(account.id)
        access_token = self._core.services.token.generate_access_token(account)
        return AuthTokens(access_token=access_token, refresh_token=refresh_token)

    async def _resolve_paper(self, account_id: UUID, paper_id: UUID) -> Paper:
        """Resolve paper owned by account. Raises NotFoundError otherwise."""
        return await self._core.services.paper.get_owned_paper(account_id, paper_id)
