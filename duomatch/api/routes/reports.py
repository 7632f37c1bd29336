from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from duomatch.api.deps import get_viewer_id
from duomatch.core.time import utc_now
from duomatch.db.session import SessionLocal
from duomatch.matching.errors import NotMatchedError
from duomatch.moderation.errors import InvalidReportCommentError, InvalidReportReasonError, SelfReportError
from duomatch.moderation.service import ReportsService

router = APIRouter(tags=["reports"])


class ReportRequest(BaseModel):
    reported_id: str = Field(min_length=1, max_length=64)
    reason: str = Field(min_length=1, max_length=32)
    comment: str | None = None


class ReportResponse(BaseModel):
    report_id: str
    match_id: str
    created: bool


@router.post("/reports", response_model=ReportResponse)
async def post_report(payload: ReportRequest, viewer_id: str = Depends(get_viewer_id)) -> ReportResponse:
    try:
        async with SessionLocal.begin() as session:
            result = await ReportsService.submit_report(
                session,
                reporter_id=viewer_id,
                reported_id=payload.reported_id,
                reason=payload.reason,
                comment=payload.comment,
                now_utc=utc_now(),
            )
    except SelfReportError as exc:
        raise HTTPException(status_code=403, detail={"code": "E_FORBIDDEN"}) from exc
    except InvalidReportReasonError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_REPORT_REASON"}) from exc
    except InvalidReportCommentError as exc:
        raise HTTPException(status_code=422, detail={"code": "E_INVALID_REPORT_COMMENT"}) from exc
    except NotMatchedError as exc:
        raise HTTPException(status_code=404, detail={"code": "E_MATCH_NOT_FOUND"}) from exc

    return ReportResponse(report_id=result.report_id, match_id=result.match_id, created=result.created)
