import logging
import threading
from typing import Iterable, List

from csv_reader import read_transactions
from models import Transaction, ClientAccount, ProcessingResult, ProcessingStats
from state_manager import StateManager
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Applies an ordered stream of transactions to client accounts.
    Every mutation goes through apply(), which holds a single lock so that
    transactions for a client are applied strictly in arrival order.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self.stats = ProcessingStats()

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply one transaction.
        Raises MissingAmountError for a deposit or withdrawal without an amount;
        already applied transactions stay applied.
        """
        with self._lock:
            result = self._processor.process_transaction(transaction)
            self.stats.record(result)
        return result

    def snapshot(self) -> List[ClientAccount]:
        """Return copies of all accounts ordered by client id."""
        with self._lock:
            return self._state.get_all_accounts()

    def process(self, transactions: Iterable[Transaction]) -> List[ClientAccount]:
        """Apply transactions in order and return the final account states."""
        for transaction in transactions:
            self.apply(transaction)

        logger.info(f"Processed: {self.stats.applied} applied, {self.stats.ignored} ignored")
        return self.snapshot()

    def process_file(self, filepath: str) -> List[ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        return self.process(read_transactions(filepath))
