from __future__ import annotations

__all__ = [
    "AllocationError",
    "EmptyDepositsError",
    "EmptyPlansError",
    "TooManyPlansError",
    "InvalidPlanKindError",
    "InvalidPortfolioError",
]


class AllocationError(ValueError):
    """Raised when a plan/deposit batch fails allocation preconditions."""


class EmptyDepositsError(AllocationError):
    def __init__(self, message: str = "You must pass a non-empty deposits.") -> None:
        super().__init__(message)


class EmptyPlansError(AllocationError):
    def __init__(
        self, message: str = "You must pass a non-empty deposit plans."
    ) -> None:
        super().__init__(message)


class TooManyPlansError(AllocationError):
    """Raised when the batch holds more plans than the configured maximum."""

    def __init__(self, count: int, max_plans: int) -> None:
        super().__init__("Exceeded amount of deposit plans.")
        self.count = count
        self.max_plans = max_plans


class InvalidPortfolioError(AllocationError):
    """Raised when a plan's portfolios or limits have the wrong shape."""

    def __init__(self, message: str, *, portfolio: str | None = None) -> None:
        super().__init__(message)
        self.portfolio = portfolio


class InvalidPlanKindError(AllocationError):
    """Raised when at least one plan carries an unrecognised kind."""

    def __init__(self, kinds: tuple[str, ...]) -> None:
        super().__init__("Invalid plan types.")
        self.kinds = kinds
