from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def requires_amount(self) -> bool:
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class DisputeStatus(Enum):
    NONE = "none"
    DISPUTED = "disputed"
    RESOLVED = "resolved"
    CHARGEBACK = "chargeback"


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None
    dispute_status: DisputeStatus = field(default=DisputeStatus.NONE, compare=False)

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"

    def format_valid(self) -> bool:
        """Amount present exactly for deposits and withdrawals, and finite when present."""
        if self.amount is None:
            return not self.transaction_type.requires_amount
        return self.transaction_type.requires_amount and self.amount.is_finite()

    def dispute_eligible(self) -> bool:
        return self.transaction_type.requires_amount

    def in_dispute(self) -> bool:
        return self.dispute_status != DisputeStatus.NONE

    def begin_dispute(self) -> bool:
        """NONE -> DISPUTED. Returns False and leaves the status alone otherwise."""
        return self._transition(DisputeStatus.NONE, DisputeStatus.DISPUTED)

    def resolve_dispute(self) -> bool:
        """DISPUTED -> RESOLVED."""
        return self._transition(DisputeStatus.DISPUTED, DisputeStatus.RESOLVED)

    def chargeback_dispute(self) -> bool:
        """DISPUTED -> CHARGEBACK."""
        return self._transition(DisputeStatus.DISPUTED, DisputeStatus.CHARGEBACK)

    def _transition(self, expected: DisputeStatus, target: DisputeStatus) -> bool:
        if not self.dispute_eligible() or self.dispute_status != expected:
            return False
        self.dispute_status = target
        return True


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def deposit(self, amount: Decimal) -> None:
        self.available += amount

    def withdraw(self, amount: Decimal) -> bool:
        if self.available < amount:
            return False
        self.available -= amount
        return True

    def hold(self, amount: Decimal) -> None:
        # No bound check: disputing funds that were already withdrawn drives available negative.
        self.available -= amount
        self.held += amount

    def release(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def chargeback(self, amount: Decimal) -> None:
        self.held -= amount
        self.locked = True


@dataclass
class ProcessingStats:
    """Counters for a single run."""

    read: int = 0
    applied: int = 0
    rejected: int = 0

    def record_success(self) -> None:
        self.read += 1
        self.applied += 1

    def record_failure(self) -> None:
        self.read += 1
        self.rejected += 1
