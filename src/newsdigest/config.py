"""NewsDigest configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"

    # Database (MONGODB_URI must be set before startup)
    mongodb_uri: str = ""
    mongodb_db_name: str = "newsdigest"
    summaries_collection: str = "savedsummaries"

    # Connection policy
    mongodb_server_selection_timeout_ms: int = 5000  # Fail fast if no node answers
    mongodb_socket_timeout_ms: int = 45000  # Close idle sockets
    mongodb_max_pool_size: int = 10

    # Base URL of this API, used by the summaries client
    api_base_url: str = "http://localhost:8000"

    # News API (RapidAPI google-news22)
    rapidapi_key: str = ""
    news_api_host: str = "google-news22.p.rapidapi.com"
    news_country: str = "us"
    news_language: str = "en"

    # Summarization (OpenAI-compatible chat completions, Groq by default)
    groq_api_key: str = ""
    summarization_base_url: str = "https://api.groq.com/openai/v1"
    summarization_model: str = "llama3-8b-8192"
    summarization_max_articles: int = 10

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def news_api_base_url(self) -> str:
        """Base URL of the news API derived from its RapidAPI host."""
        return f"https://{self.news_api_host}/v1"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
