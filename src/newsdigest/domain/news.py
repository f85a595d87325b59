"""News article and topic summary domain entities."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from urllib.parse import urlparse


def _sanitize_url(url: str | None) -> str:
    """Reject non-HTTP(S) URLs to prevent javascript: XSS."""
    if not url:
        return ""
    scheme = urlparse(url).scheme.lower()
    if scheme in ("http", "https"):
        return url
    return ""


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


@dataclass
class NewsSource:
    """Publisher of a news article."""

    name: str
    url: str = ""
    favicon: str = ""


@dataclass
class NewsArticle:
    """A headline returned by the news API."""

    title: str
    url: str
    date: str
    thumbnail: str
    description: str
    source: NewsSource
    keywords: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)

    @classmethod
    def from_api(cls, data: dict) -> "NewsArticle":
        """Create NewsArticle from a news API item."""
        source = data.get("source") or {}
        if not isinstance(source, dict):
            source = {}
        return cls(
            title=data.get("title") or "",
            url=_sanitize_url(data.get("url")),
            date=data.get("date") or "",
            thumbnail=_sanitize_url(data.get("thumbnail")),
            description=data.get("description") or "",
            source=NewsSource(
                name=source.get("name") or "Unknown",
                url=_sanitize_url(source.get("url")),
                favicon=_sanitize_url(source.get("favicon")),
            ),
            keywords=_string_list(data.get("keywords")),
            authors=_string_list(data.get("authors")),
        )


@dataclass
class NewsResponse:
    """Result of a topic headlines request."""

    success: bool
    total: int
    articles: list[NewsArticle]


@dataclass
class TopicSummary:
    """AI-generated summary of the articles for one topic."""

    topic: str
    summary: str
    key_points: list[str]
    total_articles: int
    generated_at: datetime = field(default_factory=lambda: datetime.now(UTC))
