"""API v1 router aggregator."""

from fastapi import APIRouter

from newsdigest.api.v1.news import router as news_router
from newsdigest.api.v1.summaries import router as summaries_router

router = APIRouter(prefix="/api/v1")
router.include_router(summaries_router)
router.include_router(news_router)
