"""In-memory stand-in for the async MongoDB collection API used by the services.

Only the calls and update operators the services issue are supported. Every
call yields to the event loop first, so concurrent coroutines interleave the
way they would against a real server, while each single call stays atomic.
"""

import asyncio
import copy
from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError


@dataclass
class InsertResult:
    inserted_id: Any


@dataclass
class UpdateResult:
    matched_count: int
    modified_count: int


@dataclass
class DeleteResult:
    deleted_count: int


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


def _apply_update(doc: dict[str, Any], update: dict[str, Any]) -> bool:
    before = copy.deepcopy(doc)
    for operator, fields in update.items():
        for field, value in fields.items():
            if operator == "$set":
                doc[field] = copy.deepcopy(value)
            elif operator == "$push":
                items = doc.setdefault(field, [])
                if isinstance(value, dict) and "$each" in value:
                    items.extend(copy.deepcopy(value["$each"]))
                    if "$slice" in value:
                        limit = value["$slice"]
                        doc[field] = items[limit:] if limit < 0 else items[:limit]
                else:
                    items.append(copy.deepcopy(value))
            elif operator == "$pull":
                doc[field] = [item for item in doc.get(field, []) if not _matches(item, value)]
            else:
                raise NotImplementedError(f"Update operator {operator} is not supported")
    return doc != before


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, key: str, direction: int = 1) -> "FakeCursor":
        self._docs.sort(key=lambda d: d[key], reverse=direction < 0)
        return self

    def __aiter__(self) -> AsyncIterator[dict[str, Any]]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[dict[str, Any]]:
        for doc in self._docs:
            await asyncio.sleep(0)
            yield doc


class FakeCollection:
    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: list[dict[str, Any]] = []
        self.calls = 0
        self._unique_keys: list[tuple[str, ...]] = []

    async def _enter(self) -> None:
        self.calls += 1
        await asyncio.sleep(0)

    def _first(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((doc for doc in self.docs if _matches(doc, query)), None)

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False, **_: Any) -> str:
        if unique:
            self._unique_keys.append(tuple(key for key, _ in keys))
        return "_".join(f"{key}_{direction}" for key, direction in keys)

    async def insert_one(self, document: dict[str, Any]) -> InsertResult:
        await self._enter()
        for fields in [("_id",), *self._unique_keys]:
            if any(all(doc.get(f) == document.get(f) for f in fields) for doc in self.docs):
                raise DuplicateKeyError(f"E11000 duplicate key error collection: {self.name} index: {'_'.join(fields)}")
        self.docs.append(copy.deepcopy(document))
        return InsertResult(inserted_id=document["_id"])

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        await self._enter()
        doc = self._first(query)
        return copy.deepcopy(doc) if doc is not None else None

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        self.calls += 1
        return FakeCursor([copy.deepcopy(doc) for doc in self.docs if _matches(doc, query or {})])

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> UpdateResult:
        await self._enter()
        doc = self._first(query)
        if doc is None:
            return UpdateResult(matched_count=0, modified_count=0)
        return UpdateResult(matched_count=1, modified_count=int(_apply_update(doc, update)))

    async def find_one_and_update(
        self, query: dict[str, Any], update: dict[str, Any], return_document: bool = ReturnDocument.BEFORE
    ) -> dict[str, Any] | None:
        await self._enter()
        doc = self._first(query)
        if doc is None:
            return None
        before = copy.deepcopy(doc)
        _apply_update(doc, update)
        return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before

    async def find_one_and_delete(self, query: dict[str, Any]) -> dict[str, Any] | None:
        await self._enter()
        doc = self._first(query)
        if doc is not None:
            self.docs.remove(doc)
        return doc

    async def delete_many(self, query: dict[str, Any]) -> DeleteResult:
        await self._enter()
        kept = [doc for doc in self.docs if not _matches(doc, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return DeleteResult(deleted_count=deleted)


class FakeDatabase:
    def __init__(self) -> None:
        self._collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]
