class LedgerError(Exception):
    pass


class InvalidAmountError(LedgerError):
    pass


class InsufficientBalanceError(LedgerError):
    pass


class LedgerUserNotFoundError(LedgerError):
    pass


class TaskNotCollectableError(LedgerError):
    pass


class WithdrawalNotFoundError(LedgerError):
    pass


class IdempotencyConflictError(LedgerError):
    pass
