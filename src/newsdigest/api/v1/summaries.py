"""Saved summary API endpoints."""

import math
from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Body, Query

from newsdigest.api.dependencies import SummaryRepoDep
from newsdigest.api.errors import NotFoundError, ValidationError, store_errors
from newsdigest.api.v1.schemas import (
    MessageResponse,
    Pagination,
    SavedSummaryOut,
    SummaryListResponse,
    SummaryMutationResponse,
    SummaryResponse,
    parse_create_request,
    parse_update_request,
)
from newsdigest.domain.summary import TOPICS, SavedSummary, as_utc, default_title
from newsdigest.repositories.summary_repo import SummaryFilter

router = APIRouter(prefix="/summaries", tags=["summaries"])


@router.get("", response_model=SummaryListResponse)
async def list_summaries(
    summary_repo: SummaryRepoDep,
    topic: str | None = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    favorite: bool = Query(False),
) -> SummaryListResponse:
    """List saved summaries, most recently saved first."""
    if topic and topic != "all" and topic not in TOPICS:
        raise ValidationError(f"Invalid topic: {topic}", data=[])

    summary_filter = SummaryFilter(topic=topic, favorite_only=favorite)
    offset = (page - 1) * limit

    with store_errors("Failed to fetch summaries", data=[]):
        summaries = await summary_repo.list_summaries(
            summary_filter, offset=offset, limit=limit
        )
        total = await summary_repo.count(summary_filter)

    return SummaryListResponse(
        data=[SavedSummaryOut.from_domain(s) for s in summaries],
        pagination=Pagination(
            page=page,
            limit=limit,
            total=total,
            total_pages=math.ceil(total / limit),
        ),
    )


@router.post("", response_model=SummaryMutationResponse)
async def create_summary(
    summary_repo: SummaryRepoDep,
    body: Any = Body(None),
) -> SummaryMutationResponse:
    """Save a generated summary."""
    request = parse_create_request(body)

    summary = SavedSummary(
        id=None,
        topic=request.topic,
        summary=request.summary,
        key_points=request.key_points,
        total_articles=request.total_articles,
        generated_at=as_utc(request.generated_at),
        saved_at=datetime.now(UTC),
        title=request.title or default_title(request.topic),
        tags=request.tags or [],
        is_favorite=request.is_favorite,
    )

    with store_errors("Failed to save summary"):
        created = await summary_repo.create(summary)

    return SummaryMutationResponse(
        data=SavedSummaryOut.from_domain(created),
        message="Summary saved successfully!",
    )


@router.get("/{summary_id}", response_model=SummaryResponse)
async def get_summary(
    summary_id: str,
    summary_repo: SummaryRepoDep,
) -> SummaryResponse:
    """Get a single saved summary by ID."""
    with store_errors("Failed to fetch summary"):
        summary = await summary_repo.get_by_id(summary_id)
    if not summary:
        raise NotFoundError()
    return SummaryResponse(data=SavedSummaryOut.from_domain(summary))


@router.put("/{summary_id}", response_model=SummaryMutationResponse)
async def update_summary(
    summary_id: str,
    summary_repo: SummaryRepoDep,
    body: Any = Body(None),
) -> SummaryMutationResponse:
    """Update title, tags or favorite flag. Absent fields are left untouched."""
    request = parse_update_request(body)

    with store_errors("Failed to update summary"):
        summary = await summary_repo.update(summary_id, request.present_fields())
    if not summary:
        raise NotFoundError()

    return SummaryMutationResponse(
        data=SavedSummaryOut.from_domain(summary),
        message="Summary updated successfully!",
    )


@router.delete("/{summary_id}", response_model=MessageResponse)
async def delete_summary(
    summary_id: str,
    summary_repo: SummaryRepoDep,
) -> MessageResponse:
    """Delete a saved summary."""
    with store_errors("Failed to delete summary"):
        deleted = await summary_repo.delete(summary_id)
    if not deleted:
        raise NotFoundError()
    return MessageResponse(message="Summary deleted successfully!")
