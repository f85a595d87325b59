"""Saved summary domain entity and schema rules."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any


class Topic(StrEnum):
    """News categories used as UI filter and persisted record field."""

    HEALTH = "health"
    BUSINESS = "business"
    TECHNOLOGY = "technology"
    SPORTS = "sports"
    ENTERTAINMENT = "entertainment"
    GENERAL = "general"


TOPICS = frozenset(t.value for t in Topic)

# Python attribute -> stored document key, for the fields updates may touch
MUTABLE_FIELDS = {
    "title": "title",
    "tags": "tags",
    "is_favorite": "isFavorite",
}


class SummarySchemaError(ValueError):
    """Raised when a record violates the saved summary schema."""


def default_title(topic: str) -> str:
    """Derive the title used when a summary is saved without one."""
    return f"{topic[:1].upper()}{topic[1:]} News Summary"


def as_utc(value: datetime) -> datetime:
    """Normalize to UTC, treating naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_store_precision(value: datetime) -> datetime:
    """Truncate to the millisecond precision the store keeps."""
    return value.replace(microsecond=value.microsecond - value.microsecond % 1000)


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _check_mutable_field(name: str, value: Any) -> None:
    if name == "title" and not isinstance(value, str):
        raise SummarySchemaError("title must be a string")
    if name == "tags" and not _is_string_list(value):
        raise SummarySchemaError("tags must be a list of strings")
    if name == "is_favorite" and not isinstance(value, bool):
        raise SummarySchemaError("isFavorite must be a boolean")


@dataclass
class SavedSummary:
    """An AI-generated news summary a user chose to keep."""

    id: str | None
    topic: str
    summary: str
    key_points: list[str]
    total_articles: int
    generated_at: datetime
    saved_at: datetime
    title: str = ""
    tags: list[str] = field(default_factory=list)
    is_favorite: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def validate(self) -> None:
        """Check the record against the schema.

        Raises:
            SummarySchemaError: On the first violated rule.
        """
        if self.topic not in TOPICS:
            raise SummarySchemaError(
                f"`{self.topic}` is not a valid enum value for path `topic`"
            )
        if not isinstance(self.summary, str) or not self.summary:
            raise SummarySchemaError("summary is required")
        if not _is_string_list(self.key_points):
            raise SummarySchemaError("keyPoints must be a list of strings")
        if (
            isinstance(self.total_articles, bool)
            or not isinstance(self.total_articles, int)
            or self.total_articles < 0
        ):
            raise SummarySchemaError("totalArticles must be a non-negative integer")
        if not isinstance(self.generated_at, datetime):
            raise SummarySchemaError("generatedAt must be a datetime")
        for name in MUTABLE_FIELDS:
            _check_mutable_field(name, getattr(self, name))

    @staticmethod
    def validate_update(fields: dict[str, Any]) -> None:
        """Check a partial update containing only mutable fields."""
        for name, value in fields.items():
            if name not in MUTABLE_FIELDS:
                raise SummarySchemaError(f"{name} cannot be updated")
            _check_mutable_field(name, value)

    def to_document(self) -> dict[str, Any]:
        """Convert to a store document (without `_id`)."""
        return {
            "topic": self.topic,
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "totalArticles": self.total_articles,
            "generatedAt": self.generated_at,
            "savedAt": self.saved_at,
            "title": self.title,
            "tags": list(self.tags),
            "isFavorite": self.is_favorite,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "SavedSummary":
        """Create SavedSummary from a store document."""
        return cls(
            id=str(doc["_id"]),
            topic=doc["topic"],
            summary=doc["summary"],
            key_points=list(doc.get("keyPoints", [])),
            total_articles=doc["totalArticles"],
            generated_at=as_utc(doc["generatedAt"]),
            saved_at=as_utc(doc["savedAt"]),
            title=doc.get("title", ""),
            tags=list(doc.get("tags", [])),
            is_favorite=doc.get("isFavorite", False),
            created_at=as_utc(doc["createdAt"]) if doc.get("createdAt") else None,
            updated_at=as_utc(doc["updatedAt"]) if doc.get("updatedAt") else None,
        )
