from typing import Optional, Tuple

from errors import ErrorKind, TransactionError
from models import Transaction, TransactionType, ClientAccount
from state import StateManager


class TransactionProcessor:
    """
    Applies transactions against state.
    Returns None on success, or the TransactionError explaining the rejection.
    A rejected transaction leaves both the account and the transaction store untouched.
    """

    def __init__(self, state: StateManager):
        self._state = state

    def process_transaction(self, transaction: Transaction) -> Optional[TransactionError]:
        account = self._state.get_or_create_account(transaction.client_id)

        # Locked accounts reject everything, even malformed transactions.
        if account.locked:
            return self._error(ErrorKind.ACCOUNT_LOCKED, transaction)

        # Already filtered by the reader; checked again for callers that build transactions directly.
        if not transaction.format_valid() or transaction.in_dispute():
            return self._error(ErrorKind.INVALID_TRANSACTION, transaction)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT | TransactionType.WITHDRAWAL:
                return self._handle_new_transaction(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)
            case _:
                return self._error(ErrorKind.INVALID_TRANSACTION, transaction)

    def _handle_new_transaction(self, account: ClientAccount, transaction: Transaction) -> Optional[TransactionError]:
        if self._state.has_transaction(transaction.transaction_id):
            return self._error(ErrorKind.DUPLICATE_TRANSACTION, transaction)

        if transaction.amount <= 0:
            return self._error(ErrorKind.NON_POSITIVE_AMOUNT, transaction, amount=transaction.amount)

        if transaction.transaction_type == TransactionType.DEPOSIT:
            account.deposit(transaction.amount)
        elif not account.withdraw(transaction.amount):
            return self._error(ErrorKind.INSUFFICIENT_FUNDS, transaction)

        self._state.store_transaction(transaction)
        return None

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> Optional[TransactionError]:
        original, error = self._lookup_original(transaction)
        if error is not None:
            return error

        if not original.begin_dispute():
            return self._error(ErrorKind.INVALID_DISPUTE, transaction)

        account.hold(original.amount)
        return None

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> Optional[TransactionError]:
        original, error = self._lookup_original(transaction)
        if error is not None:
            return error

        if not original.resolve_dispute():
            return self._error(ErrorKind.INVALID_RESOLVE, transaction)

        account.release(original.amount)
        return None

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> Optional[TransactionError]:
        original, error = self._lookup_original(transaction)
        if error is not None:
            return error

        if not original.chargeback_dispute():
            return self._error(ErrorKind.INVALID_CHARGEBACK, transaction)

        account.chargeback(original.amount)
        return None

    def _lookup_original(self, transaction: Transaction) -> Tuple[Optional[Transaction], Optional[TransactionError]]:
        """Find the stored deposit/withdrawal a dispute, resolve or chargeback refers to."""
        original = self._state.get_transaction(transaction.transaction_id)

        if original is None:
            return None, self._error(ErrorKind.NON_EXISTING_DISPUTE_RESOLVE_OR_CHARGEBACK, transaction)

        if original.client_id != transaction.client_id:
            return None, self._error(ErrorKind.CLIENT_MISMATCH, transaction, owner_client_id=original.client_id)

        return original, None

    @staticmethod
    def _error(kind: ErrorKind, transaction: Transaction, **details) -> TransactionError:
        return TransactionError(
            kind=kind,
            client_id=transaction.client_id,
            transaction_id=transaction.transaction_id,
            **details,
        )
