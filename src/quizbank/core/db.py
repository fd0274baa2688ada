from collections.abc import Iterator
from contextlib import contextmanager, nullcontext
from typing import Any, Self
from uuid import UUID, uuid4

import pymongo
import structlog
from pydantic import BaseModel, ConfigDict, Field
from pymongo.asynchronous.cursor import AsyncCursor
from pymongo.errors import ConnectionFailure, PyMongoError

from quizbank.errors import TransientStoreError

logger = structlog.get_logger(__name__)


class MongoModel(BaseModel):
    id: UUID = Field(alias="_id", serialization_alias="id", default_factory=uuid4)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        json_schema_serialization_defaults_required=True,
    )

    def to_mongo(self) -> dict[str, Any]:
        """Convert the model to a dictionary for MongoDB storage with _id field."""
        data = self.model_dump()
        if "id" in data:
            data["_id"] = data.pop("id")  # Rename id → _id for MongoDB
        return data

    @classmethod
    async def list_cursor(cls, cursor: AsyncCursor[dict[str, Any]]) -> list[Self]:
        """Iterate over an AsyncCursor and return a list of model instances."""
        return [cls.model_validate(item) async for item in cursor]


@contextmanager
def store_operation(name: str, timeout: float | None = None) -> Iterator[None]:
    """Run MongoDB calls under an optional deadline (seconds).

    Without a deadline the client-wide timeoutMS applies. Timeouts and lost
    connections are re-raised as TransientStoreError, other driver errors pass through.
    """
    with pymongo.timeout(timeout) if timeout is not None else nullcontext():
        try:
            yield
        except PyMongoError as e:
            if e.timeout or isinstance(e, ConnectionFailure):
                logger.warning("store_operation_failed", operation=name, error=str(e), timeout=e.timeout)
                raise TransientStoreError from e
            raise
