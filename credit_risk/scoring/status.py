"""Credit status helpers."""
from typing import Optional

from credit_risk.scoring.history import current_time_ms
from credit_risk.scoring.records import CreditRecord

STATUS_ACTIVE = "active"
STATUS_PAID = "paid"
STATUS_OVERDUE = "overdue"


def credit_status(credit: CreditRecord, now_ms: Optional[int] = None) -> str:
    """
    Derive a credit's status from its balance and due date.

    A fully paid credit is "paid" even after its due date.
    """
    if credit.remaining_amount == 0:
        return STATUS_PAID

    now_ms = current_time_ms() if now_ms is None else now_ms
    if credit.due_date < now_ms:
        return STATUS_OVERDUE
    return STATUS_ACTIVE


def payment_progress(credit: CreditRecord) -> float:
    """Percentage of the credit amount already paid."""
    if credit.amount == 0:
        return 0
    return credit.paid_amount / credit.amount * 100
