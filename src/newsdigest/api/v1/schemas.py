"""Pydantic schemas for API request/response models."""

from dataclasses import asdict
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from newsdigest.api.errors import ValidationError, format_errors
from newsdigest.domain.news import NewsArticle, TopicSummary
from newsdigest.domain.summary import SavedSummary, Topic

# Checked in this order; the first missing field is reported
REQUIRED_CREATE_FIELDS = ("topic", "summary", "keyPoints", "totalArticles", "generatedAt")


class CamelModel(BaseModel):
    """Base model using camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Saved summaries ---


class SummaryCreateRequest(CamelModel):
    """Request body for saving a summary."""

    topic: str
    summary: str
    key_points: list[str]
    total_articles: int = Field(ge=0)
    generated_at: datetime
    title: str | None = None
    tags: list[str] | None = None
    is_favorite: bool = False


class SummaryUpdateRequest(CamelModel):
    """Partial update body. Only fields present in the request are applied."""

    title: str = ""
    tags: list[str] = Field(default_factory=list)
    is_favorite: bool = False

    def present_fields(self) -> dict[str, Any]:
        """Fields explicitly supplied by the caller, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


def _require_object(body: Any) -> dict[str, Any]:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def parse_create_request(body: Any) -> SummaryCreateRequest:
    """Check required fields, then validate types.

    Raises:
        ValidationError: Naming the first missing field, or describing the type error
    """
    body = _require_object(body)
    for name in REQUIRED_CREATE_FIELDS:
        value = body.get(name)
        if value is None or value == "":
            raise ValidationError(f"Missing required field: {name}")
    try:
        return SummaryCreateRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e.errors())) from e


def parse_update_request(body: Any) -> SummaryUpdateRequest:
    """Validate a partial update body. A missing body means no changes."""
    if body is None:
        return SummaryUpdateRequest()
    body = _require_object(body)
    try:
        return SummaryUpdateRequest.model_validate(body)
    except PydanticValidationError as e:
        raise ValidationError(format_errors(e.errors())) from e


class SavedSummaryOut(CamelModel):
    """A persisted summary as returned by the API."""

    id: str
    topic: str
    summary: str
    key_points: list[str]
    total_articles: int
    generated_at: datetime
    saved_at: datetime
    title: str
    tags: list[str]
    is_favorite: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, summary: SavedSummary) -> "SavedSummaryOut":
        return cls.model_validate(asdict(summary))


class Pagination(CamelModel):
    """Pagination block of a list response."""

    page: int
    limit: int
    total: int
    total_pages: int


class SummaryListResponse(CamelModel):
    """Response schema for a page of saved summaries."""

    success: bool = True
    data: list[SavedSummaryOut] = Field(default_factory=list)
    pagination: Pagination


class SummaryResponse(CamelModel):
    """Response schema for a single saved summary."""

    success: bool = True
    data: SavedSummaryOut


class SummaryMutationResponse(CamelModel):
    """Response schema for create and update."""

    success: bool = True
    data: SavedSummaryOut
    message: str


class MessageResponse(CamelModel):
    """Response schema carrying only a confirmation."""

    success: bool = True
    message: str


# --- News and summarization ---


class NewsSourceSchema(CamelModel):
    name: str
    url: str = ""
    favicon: str = ""


class NewsArticleSchema(CamelModel):
    """A news headline."""

    title: str
    url: str = ""
    date: str = ""
    thumbnail: str = ""
    description: str = ""
    source: NewsSourceSchema
    keywords: list[str] = Field(default_factory=list)
    authors: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, article: NewsArticle) -> "NewsArticleSchema":
        return cls.model_validate(asdict(article))

    def to_domain(self) -> NewsArticle:
        return NewsArticle.from_api(self.model_dump())


class NewsListResponse(CamelModel):
    """Response schema for topic headlines."""

    success: bool = True
    total: int
    data: list[NewsArticleSchema]


class SummarizeRequest(CamelModel):
    """Request body for generating a topic summary."""

    topic: Topic
    articles: list[NewsArticleSchema] | None = None


class TopicSummarySchema(CamelModel):
    """Generated summary, shaped so it can be posted to the summaries endpoint."""

    topic: str
    summary: str
    key_points: list[str]
    total_articles: int
    generated_at: datetime

    @classmethod
    def from_domain(cls, summary: TopicSummary) -> "TopicSummarySchema":
        return cls.model_validate(asdict(summary))


class TopicSummaryResponse(CamelModel):
    """Response schema for a generated summary."""

    success: bool = True
    data: TopicSummarySchema
