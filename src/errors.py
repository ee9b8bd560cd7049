from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    INVALID_TRANSACTION = "invalid_transaction"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    ACCOUNT_LOCKED = "account_locked"
    NON_POSITIVE_AMOUNT = "non_positive_amount"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    NON_EXISTING_DISPUTE_RESOLVE_OR_CHARGEBACK = "non_existing_dispute_resolve_or_chargeback"
    CLIENT_MISMATCH = "client_mismatch"
    INVALID_DISPUTE = "invalid_dispute"
    INVALID_RESOLVE = "invalid_resolve"
    INVALID_CHARGEBACK = "invalid_chargeback"


@dataclass(frozen=True)
class TransactionError:
    """
    Why a single event was rejected.
    Returned by the engine rather than raised: a rejection never aborts a run.
    """

    kind: ErrorKind
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None
    owner_client_id: Optional[int] = None

    def __str__(self) -> str:
        client, tx = self.client_id, self.transaction_id
        match self.kind:
            case ErrorKind.INVALID_TRANSACTION:
                return f"transaction '{tx}' formatted incorrectly"
            case ErrorKind.DUPLICATE_TRANSACTION:
                return f"transaction '{tx}' already exists in the transaction engine"
            case ErrorKind.ACCOUNT_LOCKED:
                return f"account '{client}' is locked"
            case ErrorKind.NON_POSITIVE_AMOUNT:
                return f"client '{client}' tried to deposit/withdraw a non-positive amount '{self.amount}' in transaction '{tx}'"
            case ErrorKind.INSUFFICIENT_FUNDS:
                return f"client '{client}' has insufficient funds"
            case ErrorKind.NON_EXISTING_DISPUTE_RESOLVE_OR_CHARGEBACK:
                return f"client '{client}' referred to transaction '{tx}' which doesn't exist"
            case ErrorKind.CLIENT_MISMATCH:
                return f"client '{client}' referred to transaction '{tx}' which belongs to client '{self.owner_client_id}'"
            case ErrorKind.INVALID_DISPUTE:
                return f"client '{client}' can't dispute transaction '{tx}'"
            case ErrorKind.INVALID_RESOLVE:
                return f"client '{client}' can't resolve transaction '{tx}'"
            case ErrorKind.INVALID_CHARGEBACK:
                return f"client '{client}' can't chargeback transaction '{tx}'"
        return f"client '{client}' transaction '{tx}' rejected ({self.kind.value})"
