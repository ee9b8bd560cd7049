from typing import Dict, List, Optional, Tuple

from models import Transaction, ClientAccount


class StateManager:
    """
    In-memory ledger for one run.
    Stores client accounts and the deposit/withdrawal history needed for dispute lookups.
    Transaction ids share one namespace across all clients.
    Not safe for concurrent use; events must be applied one at a time.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, Transaction] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def has_transaction(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def store_transaction(self, transaction: Transaction) -> None:
        """Store transaction for future dispute lookups."""
        self._transactions[transaction.transaction_id] = transaction

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def account_items(self) -> List[Tuple[int, ClientAccount]]:
        return list(self._accounts.items())
