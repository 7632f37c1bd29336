from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from duomatch.api.deps import get_viewer_id
from duomatch.api.routes.profile_models import (
    CompatibilityResponse,
    ProfileCardResponse,
    compatibility_response,
    profile_card_response,
)
from duomatch.db.session import SessionLocal
from duomatch.matching.constants import FEED_INITIAL_BATCH, FEED_MAX_LIMIT
from duomatch.matching.errors import ProfileNotFoundError
from duomatch.matching.feed import CandidateFeedService

router = APIRouter(tags=["feed"])


class FeedCandidateResponse(BaseModel):
    profile: ProfileCardResponse
    compatibility: CompatibilityResponse | None = None


class FeedResponse(BaseModel):
    items: list[FeedCandidateResponse]


@router.get("/feed", response_model=FeedResponse)
async def get_feed(
    viewer_id: str = Depends(get_viewer_id),
    limit: int = Query(default=FEED_INITIAL_BATCH, ge=1, le=FEED_MAX_LIMIT),
    exclude: list[str] = Query(default=[]),
) -> FeedResponse:
    try:
        async with SessionLocal.begin() as session:
            batch = await CandidateFeedService.next_batch(
                session,
                viewer_id=viewer_id,
                excluded_ids=exclude,
                limit=limit,
            )
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc

    return FeedResponse(
        items=[
            FeedCandidateResponse(
                profile=profile_card_response(item.profile),
                compatibility=compatibility_response(item.compatibility),
            )
            for item in batch
        ]
    )
