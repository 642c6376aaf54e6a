"""
Credit Amount Recommendation

Suggests how much credit a store owner can extend to a customer next.

BUCKET DESIGN:
--------------
The recommendation is expressed relative to the customer's average past
credit, picked by the share of issued credit they have paid back:

- >= 90% paid: recommend 1.5x average, allow up to 2.0x
- >= 70% paid: recommend 1.2x average, allow up to 1.5x
- >= 50% paid: recommend 1.0x average, allow up to 1.2x
- below:       recommend 0.8x average, allow up to 1.0x

A customer without any credit yet starts at a fixed 500, up to 1000.
"""
from typing import Sequence

from credit_risk.logging import get_logger
from credit_risk.scoring.history import average_amount, for_customer, total_amount
from credit_risk.scoring.messages import ReasonCode, render
from credit_risk.scoring.records import CreditRecommendation, CreditRecord, PaymentRecord

logger = get_logger(__name__)

NEW_CUSTOMER_RECOMMENDED = 500
NEW_CUSTOMER_MAX = 1000

# Payment rate thresholds (inclusive lower bound):
# (threshold, recommended multiplier, max multiplier, reason)
PAYMENT_RATE_BANDS = [
    (0.9, 1.5, 2.0, ReasonCode.EXCELLENT_HISTORY),
    (0.7, 1.2, 1.5, ReasonCode.GOOD_HISTORY),
    (0.5, 1.0, 1.2, ReasonCode.AVERAGE_HISTORY),
    (0.0, 0.8, 1.0, ReasonCode.WEAK_HISTORY),
]


def recommend_credit_amount(
    customer_id: str,
    credits: Sequence[CreditRecord] = (),
    payments: Sequence[PaymentRecord] = (),
    language: str = "fr",
) -> CreditRecommendation:
    """
    Recommend the next credit amount for a customer.

    Args:
        customer_id: Customer to advise on
        credits: Credits of the store (filtered to the customer here)
        payments: Payments of the store (filtered to the customer here)
        language: Language of the justification text

    Returns:
        CreditRecommendation with recommended and maximum amounts

    Example:
        >>> recommend_credit_amount("new-customer").recommended
        500
    """
    customer_credits = for_customer(credits, customer_id)
    customer_payments = for_customer(payments, customer_id)

    if not customer_credits:
        logger.debug("credit_recommendation_new_customer", customer_id=customer_id)
        return CreditRecommendation(
            recommended=NEW_CUSTOMER_RECOMMENDED,
            max=NEW_CUSTOMER_MAX,
            reason_code=ReasonCode.NEW_CUSTOMER,
            reason=render(ReasonCode.NEW_CUSTOMER, language),
        )

    total_credits = total_amount(customer_credits)
    payment_rate = total_amount(customer_payments) / total_credits if total_credits > 0 else 0
    average_credit = average_amount(customer_credits)

    _, recommended_factor, max_factor, reason_code = next(
        band for band in PAYMENT_RATE_BANDS if payment_rate >= band[0]
    )

    logger.debug(
        "credit_recommendation_mapped",
        customer_id=customer_id,
        payment_rate=round(payment_rate, 4),
        average_credit=average_credit,
        band=reason_code.value,
    )

    return CreditRecommendation(
        recommended=average_credit * recommended_factor,
        max=average_credit * max_factor,
        reason_code=reason_code,
        reason=render(reason_code, language),
    )


def get_recommended_credit_amount(
    customer_id: str,
    credits: Sequence[CreditRecord] = (),
    payments: Sequence[PaymentRecord] = (),
) -> CreditRecommendation:
    """Recommendation with French justification texts."""
    return recommend_credit_amount(customer_id, credits, payments)
