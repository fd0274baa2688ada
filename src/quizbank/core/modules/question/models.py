from datetime import datetime
from uuid import UUID

from pydantic import Field

from quizbank.core.db import MongoModel
from quizbank.utils import now


class Question(MongoModel):
    """Question inside a paper. Ownership follows the paper."""

    title: str
    paper_id: UUID
    completed: bool = False
    created_at: datetime = Field(default_factory=now)
