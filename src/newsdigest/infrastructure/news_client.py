"""News API (RapidAPI google-news22) client."""

import asyncio
import logging
from typing import Any

import aiohttp
from aiohttp import ClientTimeout

from newsdigest.config import get_settings
from newsdigest.domain.news import NewsArticle, NewsResponse

logger = logging.getLogger(__name__)
settings = get_settings()


class NewsClient:
    """Async client for topic headlines."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        api_host: str | None = None,
        max_concurrent: int = 5,
        timeout_seconds: int = 30,
    ) -> None:
        """Initialize news client.

        Args:
            base_url: News API base URL (defaults to config)
            api_key: RapidAPI key (defaults to config)
            api_host: RapidAPI host header (defaults to config)
            max_concurrent: Maximum concurrent requests
            timeout_seconds: Request timeout in seconds
        """
        self.base_url = base_url or settings.news_api_base_url
        self.api_key = api_key if api_key is not None else settings.rapidapi_key
        self.api_host = api_host or settings.news_api_host
        self.semaphore = asyncio.Semaphore(max_concurrent)
        self.timeout = ClientTimeout(total=timeout_seconds)
        self._session: aiohttp.ClientSession | None = None

    @property
    def headers(self) -> dict[str, str]:
        return {
            "x-rapidapi-key": self.api_key,
            "x-rapidapi-host": self.api_host,
        }

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout, headers=self.headers)
        return self._session

    async def close(self) -> None:
        """Close the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def _fetch_with_retry(
        self,
        url: str,
        params: dict[str, str] | None = None,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ) -> dict[str, Any] | None:
        """GET a JSON document, backing off on transient failures.

        Timeouts, connection errors, 429 and 5xx answers are retried with an
        exponential delay (doubled again for 429). Other statuses give up at once.

        Returns:
            Decoded JSON body, or None when every attempt failed
        """
        session = await self._get_session()

        async with self.semaphore:
            for attempt in range(1, max_retries + 1):
                delay = base_delay * 2 ** (attempt - 1)
                try:
                    async with session.get(url, params=params) as response:
                        status = response.status
                        if status == 200:
                            return await response.json()
                        if status == 429:
                            delay *= 2
                            logger.warning(f"Rate limited by news API, attempt {attempt}")
                        elif status >= 500:
                            logger.warning(f"News API returned {status}, attempt {attempt}")
                        else:
                            logger.error(f"News API returned {status} for {url}")
                            return None
                except (TimeoutError, aiohttp.ClientError) as e:
                    logger.warning(f"News API request failed ({e!r}), attempt {attempt}")

                if attempt < max_retries:
                    await asyncio.sleep(delay)

        logger.error(f"Giving up on {url} after {max_retries} attempts")
        return None

    async def get_topic_headlines(
        self,
        topic: str,
        country: str | None = None,
        language: str | None = None,
    ) -> NewsResponse | None:
        """Get headlines for a topic.

        Args:
            topic: News topic (health, business, ...)
            country: Country code (defaults to config)
            language: Language code (defaults to config)

        Returns:
            NewsResponse, or None if the request failed
        """
        if not self.api_key:
            logger.warning("RapidAPI key not configured")

        url = f"{self.base_url}/topic-headlines"
        params = {
            "country": country or settings.news_country,
            "language": language or settings.news_language,
            "topic": topic,
        }
        data = await self._fetch_with_retry(url, params=params)

        if data is None:
            return None

        if not isinstance(data, dict) or not data.get("success"):
            logger.error(f"News API reported failure for topic '{topic}'")
            return None

        items = data.get("data")
        if not isinstance(items, list):
            items = []

        articles = [NewsArticle.from_api(item) for item in items if isinstance(item, dict)]
        total = data.get("total")
        logger.info(f"Fetched {len(articles)} {topic} articles")
        return NewsResponse(
            success=True,
            total=total if isinstance(total, int) else len(articles),
            articles=articles,
        )
