from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Optional, Set

from models import ClientAccount


class StateManager:
    """
    In-memory ledger state: client accounts, deposit amounts by transaction id,
    and the ids of disputed deposits.
    Not synchronized; the engine serializes access.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        # Never pruned; resolves and chargebacks look amounts up here.
        self._deposit_amounts: Dict[int, Decimal] = {}
        self._disputed_transaction_ids: Set[int] = set()

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def store_deposit(self, transaction_id: int, amount: Decimal) -> None:
        """Record a deposit amount, replacing any earlier deposit with the same id."""
        self._deposit_amounts[transaction_id] = amount

    def get_deposit_amount(self, transaction_id: int) -> Optional[Decimal]:
        return self._deposit_amounts.get(transaction_id)

    def mark_transaction_disputed(self, transaction_id: int) -> None:
        self._disputed_transaction_ids.add(transaction_id)

    def is_transaction_disputed(self, transaction_id: int) -> bool:
        return transaction_id in self._disputed_transaction_ids

    def get_all_accounts(self) -> List[ClientAccount]:
        """Return copies of all accounts, ordered by client id."""
        return [replace(self._accounts[client_id]) for client_id in sorted(self._accounts)]
