"""
Payment Probability Prediction

Estimates how likely an outstanding store credit is to be paid, and when.

The estimate starts from a neutral prior (probability 70, confidence 50)
and is adjusted by four independent factors computed from the customer's
own history. Each factor returns a (probability, confidence) delta; the
deltas are summed and the totals clamped to 0-100.

1. Payment history (dominant factor)
   Share of the customer's issued credit that has been paid back.

   - >= 90% paid:    +20 probability, +20 confidence
   - 70% - 89% paid: +10 probability, +10 confidence
   - 50% - 69% paid: no change
   - < 50% paid:     -20 probability, +5 confidence
   - no payment ever recorded: -10 probability, -20 confidence

2. Timeliness
   Average lateness of the first payment on each past credit, counting only
   credits that were paid late.

   - average <= 0 days:  +15 probability, +10 confidence
   - 1 - 7 days late:    +5 probability
   - > 30 days late:     -25 probability

3. Time to due date
   - > 30 days left:  +10
   - > 14 days left:  +5
   - > 0 days left:   -5
   - overdue:         -2 per day overdue (capped at -30), and a further
                      -20 once more than 30 days overdue

4. Amount relative to the customer's usual credit
   - above 1.5x their average credit: -10
   - below 0.5x their average credit: +5
"""
from typing import Optional, Sequence

from credit_risk.logging import get_logger
from credit_risk.scoring.history import (
    MATCH_BY_WINDOW,
    MS_PER_DAY,
    PaymentMatcher,
    average_amount,
    current_time_ms,
    days_between,
    for_customer,
    mean,
    total_amount,
)
from credit_risk.scoring.records import (
    CreditIncreaseRecord,
    CreditRecord,
    PaymentPrediction,
    PaymentRecord,
    RiskLevel,
)

logger = get_logger(__name__)

BASE_PROBABILITY = 70
BASE_CONFIDENCE = 50

# Probabilities at or above this get a predicted payment date
PREDICTION_DATE_MIN_PROBABILITY = 50

# Probability thresholds (inclusive lower bound)
PROBABILITY_RISK_LEVELS = [
    (80, RiskLevel.LOW),
    (60, RiskLevel.MEDIUM),
    (40, RiskLevel.HIGH),
    (0, RiskLevel.CRITICAL),
]


def clamp(value: float, low: int = 0, high: int = 100):
    return max(low, min(high, value))


def probability_to_risk_level(probability: float) -> RiskLevel:
    """
    Map a payment probability (0-100) to a risk level.

    Example:
        >>> probability_to_risk_level(80)
        <RiskLevel.LOW: 'low'>
        >>> probability_to_risk_level(39)
        <RiskLevel.CRITICAL: 'critical'>
    """
    for threshold, level in PROBABILITY_RISK_LEVELS:
        if probability >= threshold:
            return level
    return RiskLevel.CRITICAL


class PaymentPredictor:
    """Predicts payment probability for a single credit."""

    def __init__(self, matching: str = MATCH_BY_WINDOW, match_window_days: int = 90):
        """
        Initialize the predictor.

        Args:
            matching: How payments are associated with credits when measuring
                      delays ("window" or "credit_id").
            match_window_days: Window used by the "window" strategy.
        """
        self.matcher = PaymentMatcher(strategy=matching, window_days=match_window_days)

    def predict(
        self,
        credit: CreditRecord,
        payments: Sequence[PaymentRecord] = (),
        credit_increases: Sequence[CreditIncreaseRecord] = (),
        all_credits: Sequence[CreditRecord] = (),
        all_payments: Sequence[PaymentRecord] = (),
        now_ms: Optional[int] = None,
    ) -> PaymentPrediction:
        """
        Predict whether and when a credit will be paid.

        Args:
            credit: The credit to score
            payments: Payments recorded against this credit
            credit_increases: Increases recorded against this credit
            all_credits: Every credit known to the store
            all_payments: Every payment known to the store
            now_ms: Reference time (defaults to the current time)

        Returns:
            PaymentPrediction for the credit. The customer's history is taken
            from all_credits/all_payments; the credit's own payments and
            increases are only reported in the log.
        """
        now_ms = current_time_ms() if now_ms is None else now_ms
        days_until_due = days_between(credit.due_date, now_ms)

        customer_credits = for_customer(all_credits, credit.customer_id)
        customer_payments = for_customer(all_payments, credit.customer_id)
        delays = self._late_payment_delays(customer_credits, customer_payments)

        history_p, history_c = self._score_payment_history(customer_credits, customer_payments)
        timeliness_p, timeliness_c = self._score_timeliness(delays)
        due_p = self._score_time_to_due(days_until_due)
        amount_p = self._score_relative_amount(credit, customer_credits)

        probability = clamp(BASE_PROBABILITY + history_p + timeliness_p + due_p + amount_p)
        confidence = clamp(BASE_CONFIDENCE + history_c + timeliness_c)
        risk_level = probability_to_risk_level(probability)

        predicted_payment_date = None
        if probability >= PREDICTION_DATE_MIN_PROBABILITY:
            predicted_payment_date = credit.due_date + int(round(mean(delays) * MS_PER_DAY))

        logger.debug(
            "payment_prediction_scored",
            credit_id=credit.id,
            customer_id=credit.customer_id,
            probability=probability,
            confidence=confidence,
            risk_level=risk_level.value,
            history_score=history_p,
            timeliness_score=timeliness_p,
            due_date_score=due_p,
            amount_score=amount_p,
            days_until_due=days_until_due,
            late_credit_count=len(delays),
            credit_payment_count=len(payments),
            credit_increase_count=len(credit_increases),
        )

        return PaymentPrediction(
            credit_id=credit.id,
            customer_id=credit.customer_id,
            customer_name=credit.customer_name,
            credit_amount=credit.amount,
            remaining_amount=credit.remaining_amount,
            due_date=credit.due_date,
            probability=probability,
            confidence=confidence,
            risk_level=risk_level,
            days_until_due=days_until_due,
            predicted_payment_date=predicted_payment_date,
        )

    def _late_payment_delays(
        self, credits: Sequence[CreditRecord], payments: Sequence[PaymentRecord]
    ) -> list[int]:
        """Days late of the first payment on each credit that was paid late."""
        delays = []
        for credit in credits:
            if not credit.due_date:
                continue
            delay = self.matcher.first_payment_delay(credit, payments)
            if delay is not None and delay > 0:
                delays.append(delay)
        return delays

    def _score_payment_history(
        self, credits: Sequence[CreditRecord], payments: Sequence[PaymentRecord]
    ) -> tuple[int, int]:
        """Score the share of issued credit that has been paid back."""
        if not payments:
            # Nothing to learn from yet
            return -10, -20

        total_credits = total_amount(credits)
        payment_rate = total_amount(payments) / total_credits * 100 if total_credits > 0 else 0

        if payment_rate >= 90:
            return 20, 20
        elif payment_rate >= 70:
            return 10, 10
        elif payment_rate < 50:
            return -20, 5
        return 0, 0

    def _score_timeliness(self, delays: Sequence[int]) -> tuple[int, int]:
        """Score the average lateness of past payments."""
        if not delays:
            return 0, 0

        average_delay = mean(delays)
        if average_delay <= 0:
            return 15, 10
        elif average_delay <= 7:
            return 5, 0
        elif average_delay > 30:
            return -25, 0
        return 0, 0

    def _score_time_to_due(self, days_until_due: int) -> int:
        """Score how close the credit is to (or how far past) its due date."""
        if days_until_due > 30:
            return 10
        elif days_until_due > 14:
            return 5
        elif days_until_due > 0:
            return -5

        days_overdue = abs(days_until_due)
        penalty = -min(days_overdue * 2, 30)
        if days_overdue > 30:
            penalty -= 20
        return penalty

    def _score_relative_amount(
        self, credit: CreditRecord, customer_credits: Sequence[CreditRecord]
    ) -> int:
        """Score the credit's size against the customer's usual credit."""
        average_credit = average_amount(customer_credits) if customer_credits else credit.amount

        if credit.amount > average_credit * 1.5:
            return -10
        elif credit.amount < average_credit * 0.5:
            return 5
        return 0


def predict_payment(
    credit: CreditRecord,
    payments: Sequence[PaymentRecord],
    credit_increases: Sequence[CreditIncreaseRecord],
    all_credits: Sequence[CreditRecord],
    all_payments: Sequence[PaymentRecord],
    now_ms: Optional[int] = None,
) -> PaymentPrediction:
    """Predict a credit's payment with the default matching rules."""
    return PaymentPredictor().predict(
        credit, payments, credit_increases, all_credits, all_payments, now_ms=now_ms
    )
