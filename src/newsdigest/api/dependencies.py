"""FastAPI dependency injection providers."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends, Request

from newsdigest.config import get_settings
from newsdigest.infrastructure.database import ConnectionCache
from newsdigest.infrastructure.news_client import NewsClient
from newsdigest.repositories.summary_repo import SummaryRepository
from newsdigest.services.summarizer import SummarizerService


def get_connection_cache(request: Request) -> ConnectionCache:
    """Provide the application's shared connection cache."""
    return request.app.state.connection_cache


ConnectionCacheDep = Annotated[ConnectionCache, Depends(get_connection_cache)]


async def get_summary_repository(
    connection: ConnectionCacheDep,
) -> AsyncGenerator[SummaryRepository, None]:
    """Provide SummaryRepository instance."""
    yield SummaryRepository(connection, get_settings().summaries_collection)


def get_news_client(request: Request) -> NewsClient:
    """Provide the application's news API client."""
    return request.app.state.news_client


def get_summarizer(request: Request) -> SummarizerService:
    """Provide the application's summarizer."""
    return request.app.state.summarizer


# Type aliases for commonly used dependencies
SummaryRepoDep = Annotated[SummaryRepository, Depends(get_summary_repository)]
NewsClientDep = Annotated[NewsClient, Depends(get_news_client)]
SummarizerDep = Annotated[SummarizerService, Depends(get_summarizer)]
