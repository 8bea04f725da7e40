"""Exception types raised by ``finance_dashboard``."""

from __future__ import annotations


class DataError(ValueError):
    """Input data from a collaborator could not be interpreted.

    Raised for values the engine cannot give a safe default to, most notably a
    transaction date that does not parse.
    """


class TransactionNotFoundError(LookupError):
    """The category update sink was given an unknown transaction id."""

    def __init__(self, transaction_id: str) -> None:
        super().__init__(f"transaction not found: {transaction_id!r}")
        self.transaction_id = transaction_id


__all__ = ["DataError", "TransactionNotFoundError"]
