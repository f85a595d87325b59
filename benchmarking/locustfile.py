"""Locust load testing script for NewsDigest."""

import random
from datetime import UTC, datetime

from locust import HttpUser, between, task

TOPICS = [
    "health",
    "business",
    "technology",
    "sports",
    "entertainment",
    "general",
]


class NewsDigestUser(HttpUser):
    """Simulated user for load testing the saved summaries API."""

    wait_time = between(1, 3)  # Wait 1-3 seconds between tasks

    def on_start(self) -> None:
        self.saved_ids: list[str] = []

    @task(3)
    def list_all_summaries(self) -> None:
        """List saved summaries without filters - most common operation."""
        self.client.get("/api/v1/summaries")

    @task(2)
    def list_summaries_by_topic(self) -> None:
        """List saved summaries for a random topic."""
        topic = random.choice(TOPICS)
        self.client.get(f"/api/v1/summaries?topic={topic}")

    @task(1)
    def list_favorites(self) -> None:
        """List favorited summaries."""
        self.client.get("/api/v1/summaries?favorite=true")

    @task(1)
    def load_more_summaries(self) -> None:
        """Simulate paging through saved summaries."""
        page = random.choice([2, 3, 4])
        self.client.get(f"/api/v1/summaries?page={page}&limit=10")

    @task(1)
    def save_summary(self) -> None:
        """Save a generated summary."""
        topic = random.choice(TOPICS)
        response = self.client.post(
            "/api/v1/summaries",
            json={
                "topic": topic,
                "summary": "Load test summary",
                "keyPoints": ["Point 1", "Point 2"],
                "totalArticles": 10,
                "generatedAt": datetime.now(UTC).isoformat(),
            },
        )
        if response.ok:
            self.saved_ids.append(response.json()["data"]["id"])

    @task(1)
    def toggle_favorite(self) -> None:
        """Favorite one of the summaries saved by this user."""
        if not self.saved_ids:
            return
        summary_id = random.choice(self.saved_ids)
        self.client.put(
            f"/api/v1/summaries/{summary_id}",
            json={"isFavorite": random.choice([True, False])},
            name="/api/v1/summaries/[id]",
        )
