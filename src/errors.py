from typing import Optional

from models import TransactionType


class LedgerError(Exception):
    """Base class for errors that abort processing of an input stream."""


class DecodeError(LedgerError):
    """A CSV row could not be decoded into a Transaction."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        super().__init__(message)


class MissingAmountError(LedgerError):
    """A deposit or withdrawal arrived without an amount."""

    def __init__(self, transaction_type: TransactionType):
        self.transaction_type = transaction_type
        super().__init__(f"A {transaction_type.value} must have an amount")
