import logging

from errors import MissingAmountError
from models import Transaction, TransactionType, ClientAccount, ProcessingResult
from state_manager import StateManager

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to ledger state.
    Returns ProcessingResult.IGNORED for every rejected transaction; only a deposit
    or withdrawal without an amount raises.
    Caller is responsible for serializing calls.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Returns:
            APPLIED: balances or dispute state changed
            IGNORED: locked account, unknown reference, undisputed target or insufficient funds

        Raises:
            MissingAmountError: deposit or withdrawal on an unlocked account has no amount
        """
        account = self._state.get_or_create_account(transaction.client_id)

        if account.locked:
            logger.info(f"Client {transaction.client_id}: account locked, ignoring {transaction}")
            return ProcessingResult.IGNORED

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None:
            raise MissingAmountError(TransactionType.DEPOSIT)

        account.credit(transaction.amount)
        self._state.store_deposit(transaction.transaction_id, transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None:
            raise MissingAmountError(TransactionType.WITHDRAWAL)

        if account.available - transaction.amount >= 0:
            account.debit(transaction.amount)
            return ProcessingResult.APPLIED

        logger.info(f"Withdrawal tx {transaction.transaction_id}: insufficient funds (available {account.available}, requested {transaction.amount})")
        return ProcessingResult.IGNORED

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        amount = self._state.get_deposit_amount(transaction.transaction_id)

        if amount is None:
            logger.info(f"Dispute for tx {transaction.transaction_id}: no such deposit")
            return ProcessingResult.IGNORED

        # May drive available negative when the deposit was already partly withdrawn.
        account.hold(amount)
        self._state.mark_transaction_disputed(transaction.transaction_id)
        return ProcessingResult.APPLIED

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if not self._state.is_transaction_disputed(transaction.transaction_id):
            logger.info(f"Resolve for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.IGNORED

        amount = self._state.get_deposit_amount(transaction.transaction_id)
        if amount is None:
            logger.info(f"Resolve for tx {transaction.transaction_id}: no such deposit")
            return ProcessingResult.IGNORED

        account.release_hold(amount)
        return ProcessingResult.APPLIED

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if not self._state.is_transaction_disputed(transaction.transaction_id):
            logger.info(f"Chargeback for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.IGNORED

        amount = self._state.get_deposit_amount(transaction.transaction_id)
        if amount is None:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: no such deposit")
            return ProcessingResult.IGNORED

        account.remove_held(amount)
        account.lock()
        logger.info(f"Client {account.client_id}: account locked after chargeback of tx {transaction.transaction_id}")
        return ProcessingResult.APPLIED
