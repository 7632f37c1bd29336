from __future__ import annotations

from datetime import datetime

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from duomatch.db.repo.matches_repo import MatchesRepo
from duomatch.db.repo.reports_repo import ReportsRepo
from duomatch.matching.errors import NotMatchedError
from duomatch.moderation.errors import InvalidReportCommentError, InvalidReportReasonError, SelfReportError
from duomatch.moderation.types import REPORT_COMMENT_MAX_LENGTH, ReportReason, ReportSubmission

logger = structlog.get_logger(__name__)


class ReportsService:
    @staticmethod
    async def submit_report(
        session: AsyncSession,
        *,
        reporter_id: str,
        reported_id: str,
        reason: str,
        comment: str | None,
        now_utc: datetime,
    ) -> ReportSubmission:
        """Files a report against a matched user; one report per reporter, user and match."""
        if reporter_id == reported_id:
            raise SelfReportError
        try:
            report_reason = ReportReason(reason)
        except ValueError:
            raise InvalidReportReasonError from None

        body = (comment or "").strip() or None
        if body is not None and len(body) > REPORT_COMMENT_MAX_LENGTH:
            raise InvalidReportCommentError

        match = await MatchesRepo.get_by_pair(session, user_a=reporter_id, user_b=reported_id)
        if match is None:
            raise NotMatchedError

        report_id = await ReportsRepo.create_once(
            session,
            reporter_id=reporter_id,
            reported_id=reported_id,
            match_id=match.id,
            reason=report_reason.value,
            comment=body,
            created_at=now_utc,
        )
        if report_id is None:
            existing = await ReportsRepo.get_for_match(
                session,
                reporter_id=reporter_id,
                reported_id=reported_id,
                match_id=match.id,
            )
            if existing is None:
                raise RuntimeError("report insert conflicted but no report row exists")
            return ReportSubmission(report_id=str(existing.id), match_id=str(match.id), created=False)

        logger.info(
            "report_submitted",
            report_id=str(report_id),
            reporter_id=reporter_id,
            reported_id=reported_id,
            reason=report_reason.value,
        )
        return ReportSubmission(report_id=str(report_id), match_id=str(match.id), created=True)
