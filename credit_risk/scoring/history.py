"""Helpers over a customer's credit and payment history."""
import math
import time
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, TypeVar

from credit_risk.scoring.records import CreditRecord, PaymentRecord

MS_PER_DAY = 24 * 60 * 60 * 1000

MATCH_BY_WINDOW = "window"
MATCH_BY_CREDIT_ID = "credit_id"

T = TypeVar("T")


def current_time_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def days_between(later_ms: float, earlier_ms: float) -> int:
    """Whole days from earlier_ms to later_ms, floored (negative if later_ms is earlier)."""
    return math.floor((later_ms - earlier_ms) / MS_PER_DAY)


def for_customer(records: Iterable[T], customer_id: str) -> list[T]:
    """Keep the records that belong to a customer."""
    return [r for r in records if r.customer_id == customer_id]


def total_amount(records: Iterable) -> float:
    return sum(r.amount for r in records)


def average_amount(records: Sequence) -> float:
    """Mean record amount, 0 for an empty history."""
    if not records:
        return 0
    return total_amount(records) / len(records)


def mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0


def is_overdue(credit: CreditRecord, now_ms: int) -> bool:
    """A credit is overdue when its due date has passed with a balance left."""
    return credit.remaining_amount > 0 and credit.due_date < now_ms


@dataclass(frozen=True)
class PaymentMatcher:
    """
    Associates payments with the credit they settle.

    Two strategies are supported:

    - window: any payment created less than window_days before or after the
      credit's creation counts as paying it. This is how the store history
      has always been read, and a payment can count for several credits.
    - credit_id: only payments whose credit_id is the credit's id count.
    """
    strategy: str = MATCH_BY_WINDOW
    window_days: int = 90

    def __post_init__(self):
        if self.strategy not in (MATCH_BY_WINDOW, MATCH_BY_CREDIT_ID):
            raise ValueError(f"Unknown payment matching strategy: {self.strategy}")

    def matches(self, credit: CreditRecord, payments: Iterable[PaymentRecord]) -> list[PaymentRecord]:
        """Payments associated with the credit, oldest first."""
        if self.strategy == MATCH_BY_CREDIT_ID:
            matched = [p for p in payments if p.credit_id == credit.id]
        else:
            window_ms = self.window_days * MS_PER_DAY
            matched = [p for p in payments if abs(p.created_at - credit.created_at) < window_ms]
        return sorted(matched, key=lambda p: p.created_at)

    def first_payment_delay(
        self, credit: CreditRecord, payments: Iterable[PaymentRecord]
    ) -> Optional[int]:
        """
        Days between the credit's due date and its first associated payment.

        Returns None when no payment is associated with the credit. A
        negative or zero result means the first payment came on time.
        """
        matched = self.matches(credit, payments)
        if not matched:
            return None
        return days_between(matched[0].created_at, credit.due_date)
