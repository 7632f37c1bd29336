from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

REPORT_COMMENT_MAX_LENGTH = 1000


class ReportReason(str, Enum):
    INAPPROPRIATE_MESSAGES = "inappropriate_messages"
    FAKE_PROFILE = "fake_profile"
    HARASSMENT = "harassment"
    INAPPROPRIATE_CONTENT = "inappropriate_content"
    SCAM = "scam"
    OTHER = "other"


@dataclass(frozen=True, slots=True)
class ReportSubmission:
    report_id: str
    match_id: str
    created: bool
