"""Errors raised while talking to the expense store."""


class ExpenseStoreError(RuntimeError):
    """Base class for failures surfaced to the view that made the call."""


class NetworkFailure(ExpenseStoreError):
    """The request could not complete."""


class DecodeFailure(ExpenseStoreError):
    """The response body was not the expected JSON."""


class RejectedByStore(ExpenseStoreError):
    """The store answered with a non-2xx status."""

    def __init__(self, status_code: int, detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        message = f"Store rejected the request with status {status_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ConfirmationRequired(ValueError):
    """A destructive action was requested without explicit confirmation."""


__all__ = [
    "ExpenseStoreError",
    "NetworkFailure",
    "DecodeFailure",
    "RejectedByStore",
    "ConfirmationRequired",
]
