from decimal import Decimal
from typing import Iterable

from models import ClientAccount

HEADER = "client, available, held, total, locked"


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    return f"{value:.4f}"


def format_account(account: ClientAccount) -> str:
    return (
        f"{account.client_id}, "
        f"{format_decimal(account.available)}, "
        f"{format_decimal(account.held)}, "
        f"{format_decimal(account.total)}, "
        f"{str(account.locked).lower()}"
    )


def format_accounts(accounts: Iterable[ClientAccount]) -> str:
    """Render the balances table, one line per account in the given order."""
    lines = [HEADER]
    lines.extend(format_account(account) for account in accounts)
    return "\n".join(lines)
