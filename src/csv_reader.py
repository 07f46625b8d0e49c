import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional

from errors import DecodeError
from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

# Balances are summed in the default 28-digit decimal context.
MAX_AMOUNT_DIGITS = 28
MAX_AMOUNT = Decimal("1e18")

REQUIRED_COLUMNS = ("type", "client", "tx")


def read_transactions(filepath: str) -> Iterator[Transaction]:
    """
    Lazily decode a CSV file with a `type, client, tx, amount` header into Transactions.
    Raises DecodeError on the first row that cannot be decoded.
    """
    with open(filepath, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        fieldnames = _next_or_decode_error(lambda: reader.fieldnames, reader)
        if fieldnames is None:
            logger.info(f"{filepath}: empty input")
            return

        reader.fieldnames = [name.strip() for name in fieldnames]
        missing = [column for column in REQUIRED_COLUMNS if column not in reader.fieldnames]
        if missing:
            raise DecodeError(f"missing column(s) {', '.join(missing)} in header", line_number=1)

        rows = iter(reader)
        while True:
            row = _next_or_decode_error(lambda: next(rows, None), reader)
            if row is None:
                return
            yield parse_row(row, reader.line_num)


def _next_or_decode_error(read, reader: csv.DictReader):
    """Run a read against the underlying file, turning encoding and CSV structure errors into DecodeError."""
    try:
        return read()
    except UnicodeDecodeError as e:
        # Text is decoded in chunks, so the failing line is not known.
        raise DecodeError(f"input is not valid UTF-8: {e}") from e
    except csv.Error as e:
        raise DecodeError(f"malformed CSV: {e}", reader.line_num) from e


def parse_row(row: Dict[Optional[str], object], line_number: Optional[int] = None) -> Transaction:
    """Parse CSV row into Transaction."""
    # Short rows leave trailing cells as None; extra cells land under the None key and are dropped.
    normalized = {k: v.strip() for k, v in row.items() if k is not None and isinstance(v, str)}

    try:
        transaction_type = TransactionType(_required(normalized, "type", line_number))
    except ValueError:
        raise DecodeError(f"unknown transaction type {normalized['type']!r}", line_number) from None

    client_id = _parse_int(normalized, "client", MAX_CLIENT_ID, line_number)
    transaction_id = _parse_int(normalized, "tx", MAX_TRANSACTION_ID, line_number)

    amount = None
    amount_str = normalized.get("amount", "")
    if amount_str:
        amount = _parse_amount(amount_str, line_number)

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


def _required(normalized: Dict[str, str], column: str, line_number: Optional[int]) -> str:
    value = normalized.get(column, "")
    if not value:
        raise DecodeError(f"missing {column} value", line_number)
    return value


def _parse_amount(amount_str: str, line_number: Optional[int]) -> Decimal:
    # Decimal() also takes digit-group underscores, which are not numeric CSV.
    if "_" in amount_str:
        raise DecodeError(f"invalid amount {amount_str!r}", line_number)
    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise DecodeError(f"invalid amount {amount_str!r}", line_number) from None
    if not amount.is_finite():
        raise DecodeError(f"invalid amount {amount_str!r}", line_number)
    if len(amount.as_tuple().digits) > MAX_AMOUNT_DIGITS:
        raise DecodeError(f"amount {amount_str!r} has more than {MAX_AMOUNT_DIGITS} significant digits", line_number)
    if abs(amount) >= MAX_AMOUNT:
        raise DecodeError(f"amount {amount_str!r} out of range (must be below {MAX_AMOUNT:f})", line_number)
    return amount


def _parse_int(normalized: Dict[str, str], column: str, maximum: int, line_number: Optional[int]) -> int:
    value = _required(normalized, column, line_number)
    if not (value.isascii() and value.isdigit()):
        raise DecodeError(f"invalid {column} {value!r}", line_number)
    number = int(value)
    if number > maximum:
        raise DecodeError(f"{column} {number} out of range (max {maximum})", line_number)
    return number
