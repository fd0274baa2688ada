from typing import Any
from uuid import UUID

from pymongo import ReturnDocument
from pymongo.asynchronous.database import AsyncDatabase

from quizbank.config import Config
from quizbank.core.core import Service
from quizbank.core.db import store_operation
from quizbank.core.modules.paper.validators import clean_title
from quizbank.core.modules.question.models import Question
from quizbank.errors import NotFoundError, ValidationError


class QuestionService(Service):
    """Questions of a paper. Callers check paper ownership first."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]], config: Config) -> None:
        super().__init__(database, config)
        self._collection = database.get_collection("questions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("paper_id", 1)])

    async def list_questions(self, paper_id: UUID) -> list[Question]:
        with store_operation("list_questions"):
            return await Question.list_cursor(self._collection.find({"paper_id": paper_id}).sort("created_at", 1))

    async def get_question(self, paper_id: UUID, question_id: UUID) -> Question:
        with store_operation("get_question"):
            doc = await self._collection.find_one({"_id": question_id, "paper_id": paper_id})
        if doc is None:
            raise NotFoundError(f"Question '{question_id}' not found")
        return Question.model_validate(doc)

    async def create_question(self, paper_id: UUID, title: str) -> Question:
        question = Question(title=clean_title(title), paper_id=paper_id)
        with store_operation("create_question"):
            await self._collection.insert_one(question.to_mongo())
        return question

    async def update_question(
        self, paper_id: UUID, question_id: UUID, title: str | None = None, completed: bool | None = None
    ) -> Question:
        """Partial update, None values are left unchanged."""
        changes: dict[str, Any] = {}
        if title is not None:
            changes["title"] = clean_title(title)
        if completed is not None:
            changes["completed"] = completed
        if not changes:
            raise ValidationError("Nothing to update")

        with store_operation("update_question"):
            doc = await self._collection.find_one_and_update(
                {"_id": question_id, "paper_id": paper_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        if doc is None:
            raise NotFoundError(f"Question '{question_id}' not found")
        return Question.model_validate(doc)

    async def delete_question(self, paper_id: UUID, question_id: UUID) -> Question:
        with store_operation("delete_question"):
            doc = await self._collection.find_one_and_delete({"_id": question_id, "paper_id": paper_id})
        if doc is None:
            raise NotFoundError(f"Question '{question_id}' not found")
        return Question.model_validate(doc)

    async def delete_questions_by_paper(self, paper_id: UUID) -> int:
        """Delete all questions of a paper and return count of deleted questions."""
        with store_operation("delete_questions_by_paper"):
            result = await self._collection.delete_many({"paper_id": paper_id})
        return result.deleted_count
