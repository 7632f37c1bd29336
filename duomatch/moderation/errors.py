class ReportError(Exception):
    pass


class InvalidReportReasonError(ReportError):
    pass


class InvalidReportCommentError(ReportError):
    pass


class SelfReportError(ReportError):
    pass
