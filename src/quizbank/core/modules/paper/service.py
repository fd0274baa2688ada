from typing import Any
from uuid import UUID

import structlog
from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from quizbank.config import Config
from quizbank.core.core import Service
from quizbank.core.db import store_operation
from quizbank.core.modules.paper.models import Paper
from quizbank.core.modules.paper.validators import clean_title
from quizbank.errors import NotFoundError

logger = structlog.get_logger(__name__)


class PaperService(Service):
    """Papers, always filtered by owner."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        super().__init__(database, config)
        self._collection = database.get_collection("papers")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("owner_id", 1)])

    async def list_papers(self, owner_id: UUID) -> list[Paper]:
        """Get all papers of the owner, oldest first."""
        with store_operation("list_papers"):
            return await Paper.list_cursor(self._collection.find({"owner_id": owner_id}).sort("created_at", 1))

    async def create_paper(self, owner_id: UUID, title: str) -> Paper:
        paper = Paper(title=clean_title(title), owner_id=owner_id)
        with store_operation("create_paper"):
            await self._collection.insert_one(paper.to_mongo())
        return paper

    async def get_owned_paper(self, owner_id: UUID, paper_id: UUID) -> Paper:
        """Get paper by ID. Papers of other owners are reported as not found."""
        with store_operation("get_owned_paper"):
            doc = await self._collection.find_one({"_id": paper_id, "owner_id": owner_id})
        if doc is None:
            raise NotFoundError(f"Paper '{paper_id}' not found")
        return Paper.model_validate(doc)

    async def update_paper(self, owner_id: UUID, paper_id: UUID, title: str) -> Paper:
        with store_operation("update_paper"):
            doc = await self._collection.find_one_and_update(
                {"_id": paper_id, "owner_id": owner_id},
                {"$set": {"title": clean_title(title)}},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise NotFoundError(f"Paper '{paper_id}' not found")
        return Paper.model_validate(doc)

    async def delete_paper(self, owner_id: UUID, paper_id: UUID) -> Paper:
        """Delete paper and all of its questions."""
        with store_operation("delete_paper"):
            doc = await self._collection.find_one_and_delete({"_id": paper_id, "owner_id": owner_id})
        if doc is None:
            raise NotFoundError(f"Paper '{paper_id}' not found")

        deleted_questions = await self.core.services.question.delete_questions_by_paper(paper_id)
        logger.info("paper_deleted", paper_id=str(paper_id), deleted_questions=deleted_questions)
        return Paper.model_validate(doc)
