from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from duomatch.api.deps import get_viewer_id
from duomatch.api.routes.profile_models import ProfileCardResponse, profile_card_response
from duomatch.core.time import utc_now
from duomatch.db.session import SessionLocal
from duomatch.matching.errors import (
    OwnershipViolationError,
    PremiumRequiredError,
    ProfileNotFoundError,
    RewindNotAllowedError,
)
from duomatch.matching.service import SwipeService

router = APIRouter(tags=["swipes"])


class SwipeLimitsResponse(BaseModel):
    daily_limit: int = Field(ge=0)
    used_today: int = Field(ge=0)
    remaining: int = Field(ge=0)
    can_swipe: bool
    is_premium: bool


class SwipeRequest(BaseModel):
    candidate_id: str = Field(min_length=1, max_length=64)
    is_like: bool


class SwipeResponse(BaseModel):
    outcome: str
    remaining_swipes: int = Field(ge=0)
    swipe_id: str | None = None
    matched: bool
    match_id: str | None = None


class RewindResponse(BaseModel):
    swipe_id: str
    used_today: int = Field(ge=0)
    candidate: ProfileCardResponse


@router.get("/swipes/limits", response_model=SwipeLimitsResponse)
async def get_swipe_limits(viewer_id: str = Depends(get_viewer_id)) -> SwipeLimitsResponse:
    try:
        async with SessionLocal.begin() as session:
            limits = await SwipeService.get_swipe_limits(session, viewer_id=viewer_id, now_utc=utc_now())
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc

    return SwipeLimitsResponse(
        daily_limit=limits.daily_limit,
        used_today=limits.used_today,
        remaining=limits.remaining,
        can_swipe=limits.can_swipe,
        is_premium=limits.is_premium,
    )


@router.post("/swipes", response_model=SwipeResponse)
async def post_swipe(payload: SwipeRequest, viewer_id: str = Depends(get_viewer_id)) -> SwipeResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await SwipeService.record_swipe(
                session,
                viewer_id=viewer_id,
                candidate_id=payload.candidate_id,
                is_like=payload.is_like,
                now_utc=utc_now(),
            )
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc
    except OwnershipViolationError as exc:
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"}) from exc

    return SwipeResponse(
        outcome=result.outcome.value,
        remaining_swipes=result.remaining_swipes,
        swipe_id=result.swipe_id,
        matched=result.matched,
        match_id=result.match_id,
    )


@router.post("/swipes/{swipe_id}/rewind", response_model=RewindResponse)
async def rewind_swipe(swipe_id: UUID, viewer_id: str = Depends(get_viewer_id)) -> RewindResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await SwipeService.rewind_swipe(
                session,
                viewer_id=viewer_id,
                swipe_id=swipe_id,
                now_utc=utc_now(),
            )
    except ProfileNotFoundError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_PROFILE_NOT_FOUND"}) from exc
    except PremiumRequiredError as exc:
        raise HTTPException(status_code=402, detail={"code": "E_PREMIUM_REQUIRED"}) from exc
    except OwnershipViolationError as exc:
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"}) from exc
    except RewindNotAllowedError as exc:
        raise HTTPException(status_code=409, detail={"code": "E_REWIND_NOT_ALLOWED"}) from exc

    return RewindResponse(
        swipe_id=result.swipe_id,
        used_today=result.used_today,
        candidate=profile_card_response(result.candidate),
    )
