from __future__ import annotations

import pytest

from duomatch.matching.errors import NotMatchedError
from duomatch.moderation.errors import InvalidReportCommentError, InvalidReportReasonError, SelfReportError
from duomatch.moderation.service import ReportsService
from duomatch.moderation.types import REPORT_COMMENT_MAX_LENGTH
from tests.fakes import BASE_TIME


def _matched(store) -> object:
    store.add_profile("alice")
    store.add_profile("bob")
    return store.add_match("alice", "bob")


@pytest.mark.asyncio
async def test_report_is_stored_against_the_match(store, session) -> None:
    match = _matched(store)

    result = await ReportsService.submit_report(
        session,
        reporter_id="bob",
        reported_id="alice",
        reason="harassment",
        comment="  keeps spamming  ",
        now_utc=BASE_TIME,
    )

    [report] = store.reports
    assert result.created is True
    assert result.report_id == str(report.id)
    assert result.match_id == str(match.id)
    assert (report.reporter_id, report.reported_id, report.reason) == ("bob", "alice", "harassment")
    assert report.comment == "keeps spamming"
    assert report.status == "open"


@pytest.mark.asyncio
async def test_repeated_report_returns_existing_row(store, session) -> None:
    _matched(store)

    first = await ReportsService.submit_report(
        session, reporter_id="alice", reported_id="bob", reason="scam", comment=None, now_utc=BASE_TIME
    )
    second = await ReportsService.submit_report(
        session, reporter_id="alice", reported_id="bob", reason="other", comment="again", now_utc=BASE_TIME
    )

    assert (first.created, second.created) == (True, False)
    assert second.report_id == first.report_id
    assert len(store.reports) == 1
    assert store.reports[0].reason == "scam"


@pytest.mark.asyncio
async def test_blank_comment_is_stored_as_none(store, session) -> None:
    _matched(store)

    await ReportsService.submit_report(
        session, reporter_id="alice", reported_id="bob", reason="fake_profile", comment="   ", now_utc=BASE_TIME
    )

    assert store.reports[0].comment is None


@pytest.mark.asyncio
async def test_report_rejects_bad_input(store, session) -> None:
    _matched(store)
    store.add_profile("carol")

    with pytest.raises(SelfReportError):
        await ReportsService.submit_report(
            session, reporter_id="alice", reported_id="alice", reason="scam", comment=None, now_utc=BASE_TIME
        )
    with pytest.raises(InvalidReportReasonError):
        await ReportsService.submit_report(
            session, reporter_id="alice", reported_id="bob", reason="boring", comment=None, now_utc=BASE_TIME
        )
    with pytest.raises(InvalidReportCommentError):
        await ReportsService.submit_report(
            session,
            reporter_id="alice",
            reported_id="bob",
            reason="other",
            comment="x" * (REPORT_COMMENT_MAX_LENGTH + 1),
            now_utc=BASE_TIME,
        )
    with pytest.raises(NotMatchedError):
        await ReportsService.submit_report(
            session, reporter_id="alice", reported_id="carol", reason="scam", comment=None, now_utc=BASE_TIME
        )

    assert store.reports == []
