"""Pytest configuration and fixtures."""

import copy
from collections import defaultdict
from collections.abc import AsyncGenerator
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import bson
import pytest
from bson import ObjectId
from bson.codec_options import CodecOptions
from httpx import ASGITransport, AsyncClient
from pymongo import DESCENDING, ReturnDocument

from newsdigest.api.dependencies import get_connection_cache
from newsdigest.domain.summary import SavedSummary
from newsdigest.main import app
from newsdigest.repositories.summary_repo import SummaryRepository

TEST_COLLECTION = "savedsummaries"


@dataclass
class FakeInsertResult:
    inserted_id: ObjectId


@dataclass
class FakeDeleteResult:
    deleted_count: int


def _to_bson(doc: dict[str, Any]) -> dict[str, Any]:
    """Round-trip through BSON so stored values match what the server keeps."""
    return bson.decode(bson.encode(doc), codec_options=CodecOptions(tz_aware=True))


def _matches(doc: dict[str, Any], query: dict[str, Any]) -> bool:
    return all(doc.get(key) == value for key, value in query.items())


class FakeCursor:
    """Chainable cursor over a snapshot of matching documents."""

    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs
        self._skip = 0
        self._limit = 0

    def sort(self, keys, direction=None) -> "FakeCursor":
        if isinstance(keys, str):
            keys = [(keys, direction)]
        # Stable sorts applied from the least significant key
        for key, order in reversed(keys):
            self._docs.sort(key=lambda d: d[key], reverse=order == DESCENDING)
        return self

    def skip(self, count: int) -> "FakeCursor":
        self._skip = count
        return self

    def limit(self, count: int) -> "FakeCursor":
        self._limit = count
        return self

    async def to_list(self, length: int | None = None) -> list[dict[str, Any]]:
        docs = self._docs[self._skip:]
        if self._limit:
            docs = docs[: self._limit]
        return copy.deepcopy(docs)


class FakeCollection:
    """In-memory stand-in for the async collection methods the repository uses."""

    def __init__(self) -> None:
        self.docs: list[dict[str, Any]] = []
        self.indexes: list[Any] = []

    def find(self, query: dict[str, Any] | None = None) -> FakeCursor:
        return FakeCursor([d for d in self.docs if _matches(d, query or {})])

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for d in self.docs if _matches(d, query))

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self.docs:
            if _matches(doc, query):
                return copy.deepcopy(doc)
        return None

    async def insert_one(self, doc: dict[str, Any]) -> FakeInsertResult:
        stored = _to_bson({"_id": ObjectId(), **doc})
        self.docs.append(stored)
        return FakeInsertResult(inserted_id=stored["_id"])

    async def find_one_and_update(
        self,
        query: dict[str, Any],
        update: dict[str, Any],
        return_document: ReturnDocument = ReturnDocument.BEFORE,
    ) -> dict[str, Any] | None:
        for doc in self.docs:
            if _matches(doc, query):
                before = copy.deepcopy(doc)
                doc.update(_to_bson(update["$set"]))
                return copy.deepcopy(doc) if return_document == ReturnDocument.AFTER else before
        return None

    async def delete_one(self, query: dict[str, Any]) -> FakeDeleteResult:
        for i, doc in enumerate(self.docs):
            if _matches(doc, query):
                del self.docs[i]
                return FakeDeleteResult(deleted_count=1)
        return FakeDeleteResult(deleted_count=0)

    async def delete_many(self, query: dict[str, Any]) -> FakeDeleteResult:
        kept = [d for d in self.docs if not _matches(d, query)]
        deleted = len(self.docs) - len(kept)
        self.docs = kept
        return FakeDeleteResult(deleted_count=deleted)

    async def create_index(self, keys: Any, **kwargs: Any) -> str:
        self.indexes.append(keys)
        return str(keys)


class FakeConnectionCache:
    """Connection cache serving FakeCollections; set `error` to simulate an outage."""

    def __init__(self) -> None:
        self.database: defaultdict[str, FakeCollection] = defaultdict(FakeCollection)
        self.error: Exception | None = None

    async def acquire(self) -> defaultdict[str, FakeCollection]:
        if self.error is not None:
            raise self.error
        return self.database

    async def get_collection(self, name: str) -> FakeCollection:
        database = await self.acquire()
        return database[name]

    async def ping(self) -> None:
        await self.acquire()

    async def close(self) -> None:
        pass


def make_summary(**kwargs: Any) -> SavedSummary:
    """Create a SavedSummary with sensible defaults."""
    defaults = {
        "id": None,
        "topic": "technology",
        "summary": "Chips got faster.",
        "key_points": ["a", "b"],
        "total_articles": 5,
        "generated_at": datetime(2025, 1, 1, tzinfo=UTC),
        "saved_at": datetime(2025, 1, 1, 12, tzinfo=UTC),
        "title": "Technology News Summary",
    }
    defaults.update(kwargs)
    return SavedSummary(**defaults)


async def seed_summaries(
    repo: SummaryRepository, count: int, **kwargs: Any
) -> list[SavedSummary]:
    """Insert `count` summaries saved one minute apart, oldest first."""
    base = datetime(2025, 3, 1, tzinfo=UTC)
    created = []
    for i in range(count):
        created.append(
            await repo.create(make_summary(saved_at=base + timedelta(minutes=i), **kwargs))
        )
    return created


@pytest.fixture
def fake_cache() -> FakeConnectionCache:
    """Create an in-memory connection cache."""
    return FakeConnectionCache()


@pytest.fixture
def fake_collection(fake_cache: FakeConnectionCache) -> FakeCollection:
    """The collection backing saved summaries."""
    return fake_cache.database[TEST_COLLECTION]


@pytest.fixture
def summary_repo(fake_cache: FakeConnectionCache) -> SummaryRepository:
    """Create a repository over the in-memory store."""
    return SummaryRepository(fake_cache, TEST_COLLECTION)  # type: ignore[arg-type]


@pytest.fixture
async def client(fake_cache: FakeConnectionCache) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client wired to the in-memory store."""
    app.dependency_overrides[get_connection_cache] = lambda: fake_cache
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_summary")
def make_summary_fixture():
    """Factory for SavedSummary objects."""
    return make_summary


@pytest.fixture(name="seed_summaries")
def seed_summaries_fixture(summary_repo: SummaryRepository):
    """Insert summaries saved one minute apart: `await seed_summaries(n, **fields)`."""

    async def _seed(count: int, **kwargs: Any) -> list[SavedSummary]:
        return await seed_summaries(summary_repo, count, **kwargs)

    return _seed
