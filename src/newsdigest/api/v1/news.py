"""News headline and summarization endpoints."""

from fastapi import APIRouter, Query

from newsdigest.api.dependencies import NewsClientDep, SummarizerDep
from newsdigest.api.errors import UpstreamError
from newsdigest.api.v1.schemas import (
    NewsArticleSchema,
    NewsListResponse,
    SummarizeRequest,
    TopicSummaryResponse,
    TopicSummarySchema,
)
from newsdigest.domain.summary import Topic

router = APIRouter(prefix="/news", tags=["news"])


@router.get("", response_model=NewsListResponse)
async def list_news(
    news_client: NewsClientDep,
    topic: Topic = Query(Topic.GENERAL),
) -> NewsListResponse:
    """Fetch current headlines for a topic."""
    response = await news_client.get_topic_headlines(topic.value)
    if response is None:
        raise UpstreamError("Failed to fetch news", data=[])

    return NewsListResponse(
        total=response.total,
        data=[NewsArticleSchema.from_domain(a) for a in response.articles],
    )


@router.post("/summary", response_model=TopicSummaryResponse)
async def summarize_news(
    request: SummarizeRequest,
    news_client: NewsClientDep,
    summarizer: SummarizerDep,
) -> TopicSummaryResponse:
    """Generate an AI summary of a topic's headlines.

    Uses the supplied articles, or fetches current headlines when none are given.
    """
    topic = request.topic.value
    if request.articles is not None:
        articles = [a.to_domain() for a in request.articles]
    else:
        response = await news_client.get_topic_headlines(topic)
        if response is None:
            raise UpstreamError("Failed to fetch news")
        articles = response.articles

    summary = await summarizer.generate_topic_summary(topic, articles)
    return TopicSummaryResponse(data=TopicSummarySchema.from_domain(summary))
