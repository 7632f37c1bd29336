class MatchingError(Exception):
    pass


class ProfileNotFoundError(MatchingError):
    pass


class OwnershipViolationError(MatchingError):
    pass


class PremiumRequiredError(MatchingError):
    pass


class RewindNotAllowedError(MatchingError):
    pass


class NotMatchedError(MatchingError):
    pass
