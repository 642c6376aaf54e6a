"""
Customer Risk Profile

Summarizes a customer's repayment behaviour as a risk score from 0 (safe)
to 100 (riskiest), with suggested actions for the store owner.

SCORING:
--------
The score is the sum of four bands, capped at 100:

1. Payment rate (share of issued credit paid back)
   - < 50%: +40
   - < 70%: +20
   - < 90%: +10

2. Average payment delay
   - > 30 days: +30
   - > 14 days: +20
   - > 7 days:  +10

3. On-time payment rate
   - < 50%: +30
   - < 70%: +15

4. Credits currently overdue with a balance left
   - more than 2: +20
   - at least 1:  +10

A customer with no credit at all has no payment rate to judge and scores 0.

RECOMMENDATIONS:
----------------
One block of actions for the score band (>= 75, >= 50, >= 25, below),
followed by a flexible-plan suggestion when the average delay exceeds two
weeks and an automatic-reminder suggestion when fewer than 70% of payments
are on time. The order is fixed.
"""
from typing import Optional, Sequence

from credit_risk.logging import get_logger
from credit_risk.scoring.history import (
    MATCH_BY_WINDOW,
    PaymentMatcher,
    current_time_ms,
    days_between,
    for_customer,
    is_overdue,
    mean,
    total_amount,
)
from credit_risk.scoring.messages import RecommendationCode, render_all
from credit_risk.scoring.records import CreditRecord, CustomerRiskProfile, PaymentRecord, RiskLevel

logger = get_logger(__name__)

# Score thresholds (exclusive upper bound)
SCORE_RISK_LEVELS = [
    (25, RiskLevel.LOW),
    (50, RiskLevel.MEDIUM),
    (75, RiskLevel.HIGH),
]

# Score bands (inclusive lower bound) and the actions they call for
SCORE_BAND_RECOMMENDATIONS = [
    (75, [
        RecommendationCode.LIMIT_NEW_CREDIT,
        RecommendationCode.CONTACT_IMMEDIATELY,
        RecommendationCode.OFFER_INSTALMENT_PLAN,
    ]),
    (50, [
        RecommendationCode.MONITOR_PAYMENTS,
        RecommendationCode.SEND_DUE_REMINDERS,
        RecommendationCode.LIMIT_CREDIT_AMOUNTS,
    ]),
    (25, [
        RecommendationCode.KEEP_REGULAR_CONTACT,
        RecommendationCode.OFFER_EARLY_PAYMENT_INCENTIVES,
    ]),
    (0, [
        RecommendationCode.OFFER_PREFERENTIAL_TERMS,
        RecommendationCode.CONSIDER_RAISING_LIMITS,
    ]),
]

FLEXIBLE_PLAN_MIN_DELAY_DAYS = 14
AUTOMATIC_REMINDERS_MAX_ON_TIME_RATE = 70


def score_to_risk_level(score: float) -> RiskLevel:
    """
    Map a risk score (0-100) to a risk level.

    Example:
        >>> score_to_risk_level(24)
        <RiskLevel.LOW: 'low'>
        >>> score_to_risk_level(75)
        <RiskLevel.CRITICAL: 'critical'>
    """
    for threshold, level in SCORE_RISK_LEVELS:
        if score < threshold:
            return level
    return RiskLevel.CRITICAL


def recommendations_for(
    risk_score: float, average_payment_delay: float, on_time_payment_rate: float
) -> list[RecommendationCode]:
    """Ordered actions for a profile: score-band block first, then the conditional extras."""
    codes: list[RecommendationCode] = []
    for threshold, band_codes in SCORE_BAND_RECOMMENDATIONS:
        if risk_score >= threshold:
            codes.extend(band_codes)
            break

    if average_payment_delay > FLEXIBLE_PLAN_MIN_DELAY_DAYS:
        codes.append(RecommendationCode.OFFER_FLEXIBLE_PLAN)
    if on_time_payment_rate < AUTOMATIC_REMINDERS_MAX_ON_TIME_RATE:
        codes.append(RecommendationCode.ENABLE_AUTOMATIC_REMINDERS)
    return codes


class RiskProfiler:
    """Builds customer risk profiles from credit and payment history."""

    def __init__(
        self,
        matching: str = MATCH_BY_WINDOW,
        match_window_days: int = 90,
        language: str = "fr",
    ):
        self.matcher = PaymentMatcher(strategy=matching, window_days=match_window_days)
        self.language = language

    def profile(
        self,
        customer_id: str,
        customer_name: str,
        credits: Sequence[CreditRecord] = (),
        payments: Sequence[PaymentRecord] = (),
        now_ms: Optional[int] = None,
    ) -> CustomerRiskProfile:
        """
        Build the risk profile of one customer.

        Args:
            customer_id: Customer to profile
            customer_name: Display name copied to the profile
            credits: Credits of the store (filtered to the customer here)
            payments: Payments of the store (filtered to the customer here)
            now_ms: Reference time (defaults to the current time)
        """
        now_ms = current_time_ms() if now_ms is None else now_ms
        customer_credits = for_customer(credits, customer_id)
        customer_payments = for_customer(payments, customer_id)

        total_credits = total_amount(customer_credits)
        total_paid = total_amount(customer_payments)

        delays = self._payment_delays(customer_credits, customer_payments, now_ms)
        average_payment_delay = mean(delays)
        on_time_payment_rate = (
            sum(1 for d in delays if d <= 0) / len(delays) * 100 if delays else 100.0
        )
        overdue_count = sum(1 for c in customer_credits if is_overdue(c, now_ms))

        rate_score = self._score_payment_rate(total_credits, total_paid)
        delay_score = self._score_average_delay(average_payment_delay)
        on_time_score = self._score_on_time_rate(on_time_payment_rate)
        overdue_score = self._score_overdue_count(overdue_count)

        risk_score = min(100, rate_score + delay_score + on_time_score + overdue_score)
        risk_level = score_to_risk_level(risk_score)
        codes = recommendations_for(risk_score, average_payment_delay, on_time_payment_rate)

        logger.debug(
            "risk_profile_scored",
            customer_id=customer_id,
            risk_score=risk_score,
            risk_level=risk_level.value,
            payment_rate_score=rate_score,
            delay_score=delay_score,
            on_time_score=on_time_score,
            overdue_score=overdue_score,
            credit_count=len(customer_credits),
            payment_count=len(customer_payments),
            overdue_count=overdue_count,
        )

        return CustomerRiskProfile(
            customer_id=customer_id,
            customer_name=customer_name,
            risk_score=risk_score,
            risk_level=risk_level,
            total_credits=total_credits,
            total_paid=total_paid,
            average_payment_delay=average_payment_delay,
            on_time_payment_rate=on_time_payment_rate,
            recommendation_codes=codes,
            recommendations=render_all(codes, self.language),
        )

    def _payment_delays(
        self,
        credits: Sequence[CreditRecord],
        payments: Sequence[PaymentRecord],
        now_ms: int,
    ) -> list[int]:
        """
        Collect one delay per credit where lateness can be observed.

        A paid credit contributes the lateness of its first payment when it
        was late. An unpaid credit past its due date contributes the days it
        has been overdue so far.
        """
        delays = []
        for credit in credits:
            if not credit.due_date:
                continue
            delay = self.matcher.first_payment_delay(credit, payments)
            if delay is not None:
                if delay > 0:
                    delays.append(delay)
            elif is_overdue(credit, now_ms):
                delays.append(days_between(now_ms, credit.due_date))
        return delays

    def _score_payment_rate(self, total_credits: float, total_paid: float) -> int:
        if total_credits <= 0:
            return 0

        payment_rate = total_paid / total_credits * 100
        if payment_rate < 50:
            return 40
        elif payment_rate < 70:
            return 20
        elif payment_rate < 90:
            return 10
        return 0

    def _score_average_delay(self, average_delay: float) -> int:
        if average_delay > 30:
            return 30
        elif average_delay > 14:
            return 20
        elif average_delay > 7:
            return 10
        return 0

    def _score_on_time_rate(self, on_time_rate: float) -> int:
        if on_time_rate < 50:
            return 30
        elif on_time_rate < 70:
            return 15
        return 0

    def _score_overdue_count(self, overdue_count: int) -> int:
        if overdue_count > 2:
            return 20
        elif overdue_count > 0:
            return 10
        return 0


def calculate_customer_risk_profile(
    customer_id: str,
    customer_name: str,
    credits: Sequence[CreditRecord] = (),
    payments: Sequence[PaymentRecord] = (),
    now_ms: Optional[int] = None,
) -> CustomerRiskProfile:
    """Profile a customer with the default matching rules and French texts."""
    return RiskProfiler().profile(customer_id, customer_name, credits, payments, now_ms=now_ms)
