from datetime import datetime
from uuid import UUID

from pydantic import Field

from quizbank.core.db import MongoModel
from quizbank.utils import now


class Paper(MongoModel):
    """Question paper owned by a single account."""

    title: str
    owner_id: UUID
    created_at: datetime = Field(default_factory=now)
