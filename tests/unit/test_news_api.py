"""Tests for the news and summarization endpoints."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from newsdigest.api.dependencies import get_news_client, get_summarizer
from newsdigest.domain.news import NewsArticle, NewsResponse, NewsSource, TopicSummary
from newsdigest.main import app


def _make_article(title: str = "Headline") -> NewsArticle:
    return NewsArticle(
        title=title,
        url="https://example.com/a",
        date="Mon, 06 Jan 2025 10:00:00 GMT",
        thumbnail="",
        description="Desc",
        source=NewsSource(name="Example"),
    )


@pytest.fixture
def news_client():
    client = MagicMock()
    articles = [_make_article("A"), _make_article("B")]
    client.get_topic_headlines = AsyncMock(
        return_value=NewsResponse(success=True, total=2, articles=articles)
    )
    app.dependency_overrides[get_news_client] = lambda: client
    return client


@pytest.fixture
def summarizer():
    service = MagicMock()

    async def _generate(topic, articles):
        return TopicSummary(
            topic=topic,
            summary="Summary",
            key_points=["K"],
            total_articles=len(articles),
            generated_at=datetime(2025, 1, 1, tzinfo=UTC),
        )

    service.generate_topic_summary = AsyncMock(side_effect=_generate)
    app.dependency_overrides[get_summarizer] = lambda: service
    return service


class TestListNews:
    @pytest.mark.asyncio
    async def test_returns_articles(self, client, news_client):
        response = await client.get("/api/v1/news", params={"topic": "business"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["total"] == 2
        assert [a["title"] for a in body["data"]] == ["A", "B"]
        assert body["data"][0]["source"]["name"] == "Example"
        news_client.get_topic_headlines.assert_awaited_once_with("business")

    @pytest.mark.asyncio
    async def test_defaults_to_general(self, client, news_client):
        await client.get("/api/v1/news")

        news_client.get_topic_headlines.assert_awaited_once_with("general")

    @pytest.mark.asyncio
    async def test_unknown_topic_rejected(self, client, news_client):
        response = await client.get("/api/v1/news", params={"topic": "weather"})

        assert response.status_code == 400
        news_client.get_topic_headlines.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_upstream_failure(self, client, news_client):
        news_client.get_topic_headlines.return_value = None

        response = await client.get("/api/v1/news", params={"topic": "health"})

        assert response.status_code == 502
        assert response.json() == {"success": False, "error": "Failed to fetch news", "data": []}


class TestSummarizeNews:
    @pytest.mark.asyncio
    async def test_fetches_articles_when_not_given(self, client, news_client, summarizer):
        response = await client.post("/api/v1/news/summary", json={"topic": "sports"})

        assert response.status_code == 200
        data = response.json()["data"]
        assert data == {
            "topic": "sports",
            "summary": "Summary",
            "keyPoints": ["K"],
            "totalArticles": 2,
            "generatedAt": "2025-01-01T00:00:00Z",
        }
        news_client.get_topic_headlines.assert_awaited_once_with("sports")

    @pytest.mark.asyncio
    async def test_uses_supplied_articles(self, client, news_client, summarizer):
        articles = [{"title": "Given", "source": {"name": "S"}}]

        response = await client.post(
            "/api/v1/news/summary", json={"topic": "health", "articles": articles}
        )

        assert response.json()["data"]["totalArticles"] == 1
        news_client.get_topic_headlines.assert_not_awaited()
        passed = summarizer.generate_topic_summary.call_args.args[1]
        assert passed[0].title == "Given"

    @pytest.mark.asyncio
    async def test_summary_can_be_saved(self, client, news_client, summarizer):
        generated = (
            await client.post("/api/v1/news/summary", json={"topic": "technology"})
        ).json()["data"]

        response = await client.post("/api/v1/summaries", json=generated)

        assert response.status_code == 200
        assert response.json()["data"]["title"] == "Technology News Summary"

    @pytest.mark.asyncio
    async def test_upstream_failure(self, client, news_client, summarizer):
        news_client.get_topic_headlines.return_value = None

        response = await client.post("/api/v1/news/summary", json={"topic": "sports"})

        assert response.status_code == 502
        summarizer.generate_topic_summary.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_invalid_topic(self, client, news_client, summarizer):
        response = await client.post("/api/v1/news/summary", json={"topic": "weather"})

        assert response.status_code == 400
        assert response.json()["success"] is False
