"""Saved summary repository for database operations."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Any

from bson import ObjectId
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.asynchronous.collection import AsyncCollection

from newsdigest.domain.summary import MUTABLE_FIELDS, SavedSummary, to_store_precision
from newsdigest.infrastructure.database import ConnectionCache

logger = logging.getLogger(__name__)


@dataclass
class SummaryFilter:
    """Filter for listing saved summaries.

    - topic: restrict to one topic; None or "all" matches every topic
    - favorite_only: restrict to favorited records
    """

    topic: str | None = None
    favorite_only: bool = False

    def is_empty(self) -> bool:
        """Check if no filters are set."""
        return not self.to_query()

    def to_query(self) -> dict[str, Any]:
        """Build the store query document."""
        query: dict[str, Any] = {}
        if self.topic and self.topic != "all":
            query["topic"] = self.topic
        if self.favorite_only:
            query["isFavorite"] = True
        return query


def _parse_object_id(summary_id: str) -> ObjectId | None:
    """Parse an id string, returning None when it is not a valid ObjectId."""
    if not ObjectId.is_valid(summary_id):
        return None
    return ObjectId(summary_id)


class SummaryRepository:
    """Repository for SavedSummary CRUD operations."""

    def __init__(self, connection: ConnectionCache, collection_name: str) -> None:
        """Initialize repository with the shared connection cache."""
        self.connection = connection
        self.collection_name = collection_name

    async def _collection(self) -> AsyncCollection:
        return await self.connection.get_collection(self.collection_name)

    async def ensure_indexes(self) -> None:
        """Create the indexes used by list queries."""
        collection = await self._collection()
        await collection.create_index([("topic", ASCENDING), ("savedAt", DESCENDING)])
        await collection.create_index([("isFavorite", ASCENDING)])

    async def list_summaries(
        self,
        summary_filter: SummaryFilter,
        offset: int = 0,
        limit: int = 10,
    ) -> list[SavedSummary]:
        """List summaries with pagination, most recently saved first."""
        collection = await self._collection()
        cursor = (
            collection.find(summary_filter.to_query())
            .sort([("savedAt", DESCENDING), ("_id", DESCENDING)])
            .skip(offset)
            .limit(limit)
        )
        docs = await cursor.to_list(length=None)
        return [SavedSummary.from_document(doc) for doc in docs]

    async def count(self, summary_filter: SummaryFilter) -> int:
        """Count summaries matching the filter, ignoring pagination."""
        collection = await self._collection()
        return await collection.count_documents(summary_filter.to_query())

    async def get_by_id(self, summary_id: str) -> SavedSummary | None:
        """Get a summary by its ID."""
        oid = _parse_object_id(summary_id)
        if oid is None:
            return None
        collection = await self._collection()
        doc = await collection.find_one({"_id": oid})
        return SavedSummary.from_document(doc) if doc else None

    async def create(self, summary: SavedSummary) -> SavedSummary:
        """Validate and insert a new summary.

        Raises:
            SummarySchemaError: If the record violates the schema
        """
        summary.validate()
        now = to_store_precision(datetime.now(UTC))
        summary = replace(
            summary,
            generated_at=to_store_precision(summary.generated_at),
            saved_at=to_store_precision(summary.saved_at),
            created_at=now,
            updated_at=now,
        )

        collection = await self._collection()
        result = await collection.insert_one(summary.to_document())
        logger.info(f"Saved {summary.topic} summary {result.inserted_id}")
        return replace(summary, id=str(result.inserted_id))

    async def update(self, summary_id: str, fields: dict[str, Any]) -> SavedSummary | None:
        """Apply a partial update of mutable fields.

        Args:
            summary_id: Summary ID
            fields: Present fields keyed by attribute name (title, tags, is_favorite)

        Returns:
            The updated summary, or None if it does not exist
        """
        if not fields:
            return await self.get_by_id(summary_id)

        SavedSummary.validate_update(fields)

        oid = _parse_object_id(summary_id)
        if oid is None:
            return None

        changes = {MUTABLE_FIELDS[name]: value for name, value in fields.items()}
        changes["updatedAt"] = to_store_precision(datetime.now(UTC))

        collection = await self._collection()
        doc = await collection.find_one_and_update(
            {"_id": oid},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
        if doc is None:
            return None
        logger.info(f"Updated summary {summary_id}: {sorted(fields)}")
        return SavedSummary.from_document(doc)

    async def delete(self, summary_id: str) -> bool:
        """Delete a summary. Returns False if it did not exist."""
        oid = _parse_object_id(summary_id)
        if oid is None:
            return False
        collection = await self._collection()
        result = await collection.delete_one({"_id": oid})
        if result.deleted_count:
            logger.info(f"Deleted summary {summary_id}")
        return result.deleted_count > 0

    async def delete_all(self, summary_filter: SummaryFilter | None = None) -> int:
        """Delete every summary matching the filter. Returns the count removed."""
        query = summary_filter.to_query() if summary_filter else {}
        collection = await self._collection()
        result = await collection.delete_many(query)
        return result.deleted_count
