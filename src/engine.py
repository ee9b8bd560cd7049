import logging
from typing import Dict, Iterable, List, Optional, Tuple

from errors import TransactionError
from models import Transaction, ClientAccount, ProcessingStats
from processor import TransactionProcessor
from reader import read_transactions
from state import StateManager

logger = logging.getLogger(__name__)


class PaymentsEngine:
    """
    Applies a stream of transactions, in order, to an in-memory ledger.

    Each engine owns its own accounts and transaction store; build a fresh one per run.
    Rejected transactions are reported to the diagnostics logger and never stop the run.
    """

    def __init__(self, diagnostics: Optional[logging.Logger] = None):
        self._state = StateManager()
        self._processor = TransactionProcessor(self._state)
        self._diagnostics = diagnostics or logger

    def apply(self, transaction: Transaction) -> Optional[TransactionError]:
        """Apply one transaction. Returns None on success, otherwise why it was rejected."""
        return self._processor.process_transaction(transaction)

    def accounts_snapshot(self) -> List[Tuple[int, ClientAccount]]:
        """(client id, account) pairs. Order is not guaranteed."""
        return self._state.account_items()

    def process_transactions(self, transactions: Iterable[Transaction]) -> ProcessingStats:
        stats = ProcessingStats()
        reported_header = False

        for transaction in transactions:
            error = self.apply(transaction)
            if error is None:
                stats.record_success()
                continue

            stats.record_failure()
            if not reported_header:
                self._diagnostics.warning("errors: ")
                reported_header = True
            self._diagnostics.warning(f"  {error}")

        logger.info(f"Processed {stats.read} transactions: {stats.applied} applied, {stats.rejected} rejected")
        return stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        transactions = read_transactions(filepath, self._diagnostics)
        self.process_transactions(transactions)
        return dict(self.accounts_snapshot())
