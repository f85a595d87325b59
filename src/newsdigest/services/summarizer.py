"""Topic summarization through an OpenAI-compatible chat completions API."""

import json
import logging
import re
from typing import Any

from openai import AsyncOpenAI

from newsdigest.config import get_settings
from newsdigest.domain.news import NewsArticle, TopicSummary

logger = logging.getLogger(__name__)
settings = get_settings()

SYSTEM_PROMPT = (
    "You are a professional news analyst. Provide clear, concise, and informative "
    "summaries of news topics. Always respond with valid JSON format only. Do not "
    "include any explanatory text outside the JSON structure."
)

SUMMARIZATION_PROMPT = """Analyze the following {topic} news articles and provide a comprehensive summary and key points.

News Articles:
{articles}

Please provide:
1. A comprehensive summary of the main trends and developments (2-3 paragraphs)
2. 3-5 key points highlighting the most important information

Respond ONLY with valid JSON in this exact format:
{{
  "summary": "Your comprehensive summary here",
  "keyPoints": ["Point 1", "Point 2", "Point 3"]
}}

Do not include any other text, explanations, or formatting outside of this JSON structure."""

FALLBACK_KEY_POINT = "Summary generated successfully"
ERROR_SUMMARY = "Unable to generate summary at this time. Please try again later."
ERROR_KEY_POINT = "Error occurred while generating summary"

_FENCE_RE = re.compile(r"```(?:json)?\n?")
_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)
_SUMMARY_RE = re.compile(r'"summary"\s*:\s*"((?:[^"\\]|\\.)*)"')
_KEY_POINTS_RE = re.compile(r'"keyPoints"\s*:\s*\[(.*?)\]', re.DOTALL)
_QUOTED_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')


def _unescape(value: str) -> str:
    return value.replace('\\"', '"').replace("\\n", "\n")


def _from_json(content: str) -> tuple[str, list[str]] | None:
    try:
        parsed: Any = json.loads(content)
    except json.JSONDecodeError:
        return None
    if not isinstance(parsed, dict):
        return None
    summary = parsed.get("summary")
    key_points = parsed.get("keyPoints")
    if not isinstance(summary, str) or not summary or key_points is None:
        return None
    if not isinstance(key_points, list):
        key_points = [key_points]
    return summary, [str(p) for p in key_points]


def _from_fragments(content: str) -> tuple[str, list[str]] | None:
    summary_match = _SUMMARY_RE.search(content)
    if not summary_match:
        return None
    key_points = [FALLBACK_KEY_POINT]
    key_points_match = _KEY_POINTS_RE.search(content)
    if key_points_match:
        points = _QUOTED_RE.findall(key_points_match.group(1))
        if points:
            key_points = [_unescape(p) for p in points]
    return _unescape(summary_match.group(1)), key_points


def parse_summary_content(content: str) -> tuple[str, list[str]]:
    """Extract summary and key points from a model reply.

    Tries strict JSON first (after stripping code fences), then pulls the
    fields out of malformed JSON, and finally uses the raw text as the
    summary with a placeholder key point.
    """
    cleaned = _FENCE_RE.sub("", content.strip()).strip()
    match = _OBJECT_RE.search(cleaned)
    candidate = match.group(0) if match else cleaned

    parsed = _from_json(candidate)
    if parsed:
        return parsed

    logger.warning("Summary reply was not valid JSON, falling back to field extraction")
    parsed = _from_fragments(candidate)
    if parsed:
        return parsed

    return cleaned or ERROR_SUMMARY, [FALLBACK_KEY_POINT]


def format_articles(articles: list[NewsArticle], max_articles: int) -> str:
    """Render articles as prompt text."""
    return "\n\n".join(
        f"Title: {a.title}\nDescription: {a.description}\nSource: {a.source.name}"
        for a in articles[:max_articles]
    )


class SummarizerService:
    """Service for generating AI summaries of topic headlines."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
    ) -> None:
        """Initialize the summarizer."""
        self.api_key = api_key if api_key is not None else settings.groq_api_key
        self.client = AsyncOpenAI(
            api_key=self.api_key or "missing",
            base_url=base_url or settings.summarization_base_url,
        )
        self.model = model or settings.summarization_model
        self.max_articles = settings.summarization_max_articles

    def _error_summary(self, topic: str, articles: list[NewsArticle]) -> TopicSummary:
        return TopicSummary(
            topic=topic,
            summary=ERROR_SUMMARY,
            key_points=[ERROR_KEY_POINT],
            total_articles=len(articles),
        )

    async def generate_topic_summary(
        self, topic: str, articles: list[NewsArticle]
    ) -> TopicSummary:
        """Generate a summary and key points for a topic's articles."""
        if not self.api_key:
            logger.warning("Summarization API key not configured")
            return self._error_summary(topic, articles)

        prompt = SUMMARIZATION_PROMPT.format(
            topic=topic,
            articles=format_articles(articles, self.max_articles),
        )

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=1000,
                temperature=0.3,
            )
            content = response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"Failed to summarize {topic} news: {e}")
            return self._error_summary(topic, articles)

        summary, key_points = parse_summary_content(content)
        logger.info(f"Generated {topic} summary from {len(articles)} articles")
        return TopicSummary(
            topic=topic,
            summary=summary,
            key_points=key_points,
            total_articles=len(articles),
        )
