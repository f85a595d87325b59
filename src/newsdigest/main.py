"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from newsdigest.api.errors import register_error_handlers
from newsdigest.api.v1.router import router as api_router
from newsdigest.config import get_settings
from newsdigest.infrastructure.database import ConnectionCache
from newsdigest.infrastructure.news_client import NewsClient
from newsdigest.repositories.summary_repo import SummaryRepository
from newsdigest.services.summarizer import SummarizerService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting NewsDigest application...")
    logger.info(f"Environment: {settings.environment}")

    # Startup: a missing MONGODB_URI aborts here
    connection_cache = ConnectionCache()
    app.state.connection_cache = connection_cache
    app.state.news_client = NewsClient()
    app.state.summarizer = SummarizerService()

    try:
        await SummaryRepository(
            connection_cache, settings.summaries_collection
        ).ensure_indexes()
    except Exception as e:
        # Connection is retried lazily on the first request
        logger.warning(f"Could not create indexes at startup: {e}")

    yield

    # Shutdown: release outbound sessions and the database client
    await app.state.news_client.close()
    await connection_cache.close()
    logger.info("Shutting down NewsDigest application...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    docs_kwargs = {}
    if settings.is_production:
        docs_kwargs = {"docs_url": None, "redoc_url": None, "openapi_url": None}

    app = FastAPI(
        title="NewsDigest",
        description="Topic news headlines with AI summaries you can save",
        version="0.1.0",
        lifespan=lifespan,
        **docs_kwargs,
    )

    register_error_handlers(app)
    app.include_router(api_router)

    @app.get("/health")
    async def health_check(request: Request) -> JSONResponse:
        """Lightweight health check with DB connectivity test."""
        try:
            await request.app.state.connection_cache.ping()
            return JSONResponse({"status": "healthy", "database": "connected"})
        except Exception:
            return JSONResponse(
                {"status": "unhealthy", "database": "disconnected"},
                status_code=503,
            )

    return app


# Create app instance
app = create_app()
