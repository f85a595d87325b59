"""Client for the saved summaries API."""

import logging
from dataclasses import dataclass
from typing import Any

import aiohttp
from aiohttp import ClientTimeout

from newsdigest.api.v1.schemas import Pagination, SavedSummaryOut, TopicSummarySchema
from newsdigest.config import get_settings
from newsdigest.domain.summary import default_title

logger = logging.getLogger(__name__)
settings = get_settings()


class SummariesClientError(Exception):
    """Raised when the API answers with `success: false`."""

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


@dataclass
class SummaryPage:
    """One page of saved summaries."""

    summaries: list[SavedSummaryOut]
    pagination: Pagination


class SummariesClient:
    """Async client wrapping the saved summaries endpoints."""

    def __init__(self, base_url: str | None = None, timeout_seconds: int = 30) -> None:
        """Initialize summaries client.

        Args:
            base_url: Base URL of the NewsDigest API (defaults to config)
            timeout_seconds: Request timeout in seconds
        """
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.timeout = ClientTimeout(total=timeout_seconds)
        self._session: aiohttp.ClientSession | None = None

    @property
    def summaries_url(self) -> str:
        return f"{self.base_url}/api/v1/summaries"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _request(
        self,
        method: str,
        url: str,
        default_error: str,
        **kwargs: Any,
    ) -> dict[str, Any]:
        session = await self._get_session()
        async with session.request(method, url, **kwargs) as response:
            data = await response.json(content_type=None)
            if not isinstance(data, dict) or not data.get("success"):
                error = data.get("error") if isinstance(data, dict) else None
                logger.error(f"{method} {url} failed ({response.status}): {error}")
                raise SummariesClientError(error or default_error, status=response.status)
            return data

    async def save_summary(
        self,
        summary: TopicSummarySchema,
        title: str | None = None,
        tags: list[str] | None = None,
    ) -> SavedSummaryOut:
        """Persist a generated summary."""
        body = summary.model_dump(mode="json", by_alias=True)
        body["title"] = title or default_title(summary.topic)
        body["tags"] = tags or []

        data = await self._request(
            "POST", self.summaries_url, "Failed to save summary", json=body
        )
        return SavedSummaryOut.model_validate(data["data"])

    async def get_saved_summaries(
        self,
        topic: str | None = None,
        page: int = 1,
        limit: int = 10,
        favorite: bool = False,
    ) -> SummaryPage:
        """Fetch a page of saved summaries."""
        params = {
            "page": str(page),
            "limit": str(limit),
            "favorite": "true" if favorite else "false",
        }
        if topic and topic != "all":
            params["topic"] = topic

        data = await self._request(
            "GET", self.summaries_url, "Failed to fetch summaries", params=params
        )
        return SummaryPage(
            summaries=[SavedSummaryOut.model_validate(s) for s in data.get("data", [])],
            pagination=Pagination.model_validate(data["pagination"]),
        )

    async def get_summary_by_id(self, summary_id: str) -> SavedSummaryOut:
        """Fetch one saved summary."""
        data = await self._request(
            "GET", f"{self.summaries_url}/{summary_id}", "Failed to fetch summary"
        )
        return SavedSummaryOut.model_validate(data["data"])

    async def update_summary(
        self,
        summary_id: str,
        *,
        title: str | None = None,
        tags: list[str] | None = None,
        is_favorite: bool | None = None,
    ) -> SavedSummaryOut:
        """Update title, tags or favorite flag. Arguments left as None are not sent."""
        updates: dict[str, Any] = {}
        if title is not None:
            updates["title"] = title
        if tags is not None:
            updates["tags"] = tags
        if is_favorite is not None:
            updates["isFavorite"] = is_favorite

        data = await self._request(
            "PUT",
            f"{self.summaries_url}/{summary_id}",
            "Failed to update summary",
            json=updates,
        )
        return SavedSummaryOut.model_validate(data["data"])

    async def delete_summary(self, summary_id: str) -> None:
        """Delete a saved summary."""
        await self._request(
            "DELETE", f"{self.summaries_url}/{summary_id}", "Failed to delete summary"
        )
