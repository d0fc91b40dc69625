"""Error types raised by the accounting engine."""


class AccountingError(ValueError):
    """A local computation fault in the accounting engine."""


class ArithmeticOverflowError(AccountingError):
    """An intermediate or final value left its integer range.

    Raised only when a record's counters are large enough to overflow the
    on-chain program's own arithmetic, which means the record is corrupted.
    """

    def __init__(self, operation: str, value: int, limit: int):
        self.operation = operation
        self.value = value
        self.limit = limit
        super().__init__(
            f"Overflow in {operation}: {value} exceeds {limit}"
        )
