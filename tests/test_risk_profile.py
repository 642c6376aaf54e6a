"""Tests for customer risk profiles and their recommendations."""
import pytest

from credit_risk.scoring.history import MS_PER_DAY
from credit_risk.scoring.messages import RecommendationCode as Code
from credit_risk.scoring.records import CreditRecord, PaymentRecord, RiskLevel
from credit_risk.scoring.risk_profile import (
    RiskProfiler,
    calculate_customer_risk_profile,
    recommendations_for,
    score_to_risk_level,
)

NOW = 1_760_000_000_000
DAY = MS_PER_DAY


def make_credit(
    credit_id: str,
    amount: float,
    remaining: float,
    created_days_ago: float,
    due_in_days: float,
    customer_id: str = "cust-1",
) -> CreditRecord:
    return CreditRecord(
        id=credit_id,
        customer_id=customer_id,
        customer_name="Amina",
        amount=amount,
        paid_amount=amount - remaining,
        remaining_amount=remaining,
        due_date=int(NOW + due_in_days * DAY),
        created_at=int(NOW - created_days_ago * DAY),
    )


def make_payment(
    amount: float, days_ago: float, credit_id: str = "cr-1", customer_id: str = "cust-1"
) -> PaymentRecord:
    return PaymentRecord(
        id=f"pay-{credit_id}-{days_ago}",
        credit_id=credit_id,
        customer_id=customer_id,
        amount=amount,
        created_at=int(NOW - days_ago * DAY),
    )


class TestRiskProfileScenarios:
    """End-to-end profiles for typical customers."""

    def setup_method(self):
        self.profiler = RiskProfiler()

    def test_customer_without_credit(self):
        profile = self.profiler.profile("cust-1", "Amina", [], [], now_ms=NOW)

        assert profile.customer_id == "cust-1"
        assert profile.customer_name == "Amina"
        assert profile.total_credits == 0
        assert profile.total_paid == 0
        assert profile.average_payment_delay == 0
        assert profile.on_time_payment_rate == 100
        assert profile.risk_score == 0
        assert profile.risk_level == RiskLevel.LOW
        assert profile.recommendation_codes == [
            Code.OFFER_PREFERENTIAL_TERMS,
            Code.CONSIDER_RAISING_LIMITS,
        ]

    def test_reliable_customer(self):
        credits = [make_credit("cr-1", 1000, 0, created_days_ago=60, due_in_days=-30)]
        payments = [make_payment(1000, days_ago=35)]  # 5 days early

        profile = self.profiler.profile("cust-1", "Amina", credits, payments, now_ms=NOW)

        assert profile.total_credits == 1000
        assert profile.total_paid == 1000
        assert profile.on_time_payment_rate == 100
        assert profile.risk_score == 0
        assert profile.risk_level == RiskLevel.LOW

    def test_partially_paid_overdue_credit_is_medium_risk(self):
        credits = [make_credit("cr-1", 1000, 400, created_days_ago=50, due_in_days=-10)]
        payments = [make_payment(600, days_ago=45)]

        profile = self.profiler.profile("cust-1", "Amina", credits, payments, now_ms=NOW)

        # 60% paid (+20), one credit overdue with balance (+10)
        assert profile.risk_score == 30
        assert profile.risk_level == RiskLevel.MEDIUM
        assert profile.recommendation_codes == [
            Code.KEEP_REGULAR_CONTACT,
            Code.OFFER_EARLY_PAYMENT_INCENTIVES,
        ]

    def test_late_payer_is_high_risk(self):
        credits = [make_credit("cr-1", 1000, 0, created_days_ago=120, due_in_days=-100)]
        payments = [make_payment(1000, days_ago=80)]  # 20 days late

        profile = self.profiler.profile("cust-1", "Amina", credits, payments, now_ms=NOW)

        # average delay 20 (+20), no payment on time (+30)
        assert profile.average_payment_delay == 20
        assert profile.on_time_payment_rate == 0
        assert profile.risk_score == 50
        assert profile.risk_level == RiskLevel.HIGH
        assert profile.recommendation_codes == [
            Code.MONITOR_PAYMENTS,
            Code.SEND_DUE_REMINDERS,
            Code.LIMIT_CREDIT_AMOUNTS,
            Code.OFFER_FLEXIBLE_PLAN,
            Code.ENABLE_AUTOMATIC_REMINDERS,
        ]

    def test_unpaid_overdue_credit_counts_days_overdue(self):
        credits = [make_credit("cr-1", 1000, 1000, created_days_ago=80, due_in_days=-20)]

        profile = self.profiler.profile("cust-1", "Amina", credits, [], now_ms=NOW)

        # 0% paid (+40), 20 days late (+20), 0% on time (+30), one overdue (+10)
        assert profile.average_payment_delay == 20
        assert profile.risk_score == 100
        assert profile.risk_level == RiskLevel.CRITICAL
        assert profile.recommendation_codes == [
            Code.LIMIT_NEW_CREDIT,
            Code.CONTACT_IMMEDIATELY,
            Code.OFFER_INSTALMENT_PLAN,
            Code.OFFER_FLEXIBLE_PLAN,
            Code.ENABLE_AUTOMATIC_REMINDERS,
        ]

    def test_score_is_capped_at_100(self):
        credits = [
            make_credit(f"cr-{i}", 100, 100, created_days_ago=60, due_in_days=-40)
            for i in range(3)
        ]

        profile = self.profiler.profile("cust-1", "Amina", credits, [], now_ms=NOW)

        # 40 + 30 + 30 + 20 = 120 before the cap
        assert profile.risk_score == 100
        assert profile.average_payment_delay == 40

    def test_settled_credit_past_due_adds_no_delay(self):
        """A paid-off credit with no matching payment is not counted as overdue."""
        credits = [make_credit("cr-1", 1000, 0, created_days_ago=300, due_in_days=-280)]

        profile = self.profiler.profile("cust-1", "Amina", credits, [], now_ms=NOW)

        # Only the payment rate (no payment recorded) counts
        assert profile.average_payment_delay == 0
        assert profile.on_time_payment_rate == 100
        assert profile.risk_score == 40
        assert profile.risk_level == RiskLevel.MEDIUM

    def test_credit_not_yet_due_adds_no_delay(self):
        credits = [make_credit("cr-1", 1000, 1000, created_days_ago=5, due_in_days=25)]

        profile = self.profiler.profile("cust-1", "Amina", credits, [], now_ms=NOW)

        # Only the payment rate (0% paid) counts
        assert profile.on_time_payment_rate == 100
        assert profile.risk_score == 40
        assert profile.risk_level == RiskLevel.MEDIUM


class TestProfileScoping:

    def test_only_the_customer_records_are_used(self):
        credits = [
            make_credit("cr-1", 1000, 0, created_days_ago=60, due_in_days=-30),
            make_credit("cr-2", 5000, 5000, created_days_ago=80, due_in_days=-40, customer_id="cust-2"),
        ]
        payments = [
            make_payment(1000, days_ago=35),
            make_payment(10, days_ago=1, credit_id="cr-2", customer_id="cust-2"),
        ]

        profile = calculate_customer_risk_profile("cust-1", "Amina", credits, payments, now_ms=NOW)

        assert profile.total_credits == 1000
        assert profile.total_paid == 1000
        assert profile.risk_score == 0

    def test_repeated_calls_return_equal_profiles(self):
        credits = [make_credit("cr-1", 1000, 1000, created_days_ago=80, due_in_days=-20)]
        profiler = RiskProfiler()

        first = profiler.profile("cust-1", "Amina", credits, [], now_ms=NOW)
        second = profiler.profile("cust-1", "Amina", credits, [], now_ms=NOW)

        assert first == second


class TestProfileMatching:
    """Payment matching strategy also drives profile delays."""

    def _history(self):
        credits = [make_credit("cr-1", 1000, 0, created_days_ago=300, due_in_days=-280)]
        payments = [make_payment(1000, days_ago=200)]  # 80 days late
        return credits, payments

    def test_window_matching(self):
        credits, payments = self._history()

        profile = RiskProfiler(matching="window").profile(
            "cust-1", "Amina", credits, payments, now_ms=NOW
        )

        assert profile.risk_score == 0

    def test_credit_id_matching(self):
        credits, payments = self._history()

        profile = RiskProfiler(matching="credit_id").profile(
            "cust-1", "Amina", credits, payments, now_ms=NOW
        )

        assert profile.average_payment_delay == 80
        assert profile.risk_score == 60
        assert profile.risk_level == RiskLevel.HIGH


class TestRecommendationTexts:

    def test_french_by_default(self):
        profile = RiskProfiler().profile("cust-1", "Amina", [], [], now_ms=NOW)

        assert profile.recommendations == [
            "Client fiable - Peut bénéficier de conditions préférentielles",
            "Envisager d'augmenter les limites de crédit",
        ]

    def test_english(self):
        profile = RiskProfiler(language="en").profile("cust-1", "Amina", [], [], now_ms=NOW)

        assert profile.recommendations == [
            "Reliable customer - Eligible for preferential terms",
            "Consider raising credit limits",
        ]


class TestRecommendationOrdering:
    """Score band block first, then the conditional extras."""

    @pytest.mark.parametrize(
        "score, first_code",
        [
            (100, Code.LIMIT_NEW_CREDIT),
            (75, Code.LIMIT_NEW_CREDIT),
            (74, Code.MONITOR_PAYMENTS),
            (50, Code.MONITOR_PAYMENTS),
            (49, Code.KEEP_REGULAR_CONTACT),
            (25, Code.KEEP_REGULAR_CONTACT),
            (24, Code.OFFER_PREFERENTIAL_TERMS),
            (0, Code.OFFER_PREFERENTIAL_TERMS),
        ],
    )
    def test_band_block(self, score, first_code):
        assert recommendations_for(score, 0, 100)[0] == first_code

    def test_flexible_plan_needs_more_than_two_weeks_delay(self):
        assert Code.OFFER_FLEXIBLE_PLAN not in recommendations_for(0, 14, 100)
        assert recommendations_for(0, 15, 100)[-1] == Code.OFFER_FLEXIBLE_PLAN

    def test_automatic_reminders_below_70_percent_on_time(self):
        assert Code.ENABLE_AUTOMATIC_REMINDERS not in recommendations_for(0, 0, 70)
        assert recommendations_for(0, 0, 69)[-1] == Code.ENABLE_AUTOMATIC_REMINDERS

    def test_extras_follow_band_block(self):
        codes = recommendations_for(30, 20, 50)

        assert codes == [
            Code.KEEP_REGULAR_CONTACT,
            Code.OFFER_EARLY_PAYMENT_INCENTIVES,
            Code.OFFER_FLEXIBLE_PLAN,
            Code.ENABLE_AUTOMATIC_REMINDERS,
        ]


class TestScoreRiskLevels:

    @pytest.mark.parametrize(
        "score, level",
        [
            (0, RiskLevel.LOW),
            (24, RiskLevel.LOW),
            (25, RiskLevel.MEDIUM),
            (49, RiskLevel.MEDIUM),
            (50, RiskLevel.HIGH),
            (74, RiskLevel.HIGH),
            (75, RiskLevel.CRITICAL),
            (100, RiskLevel.CRITICAL),
        ],
    )
    def test_thresholds(self, score, level):
        assert score_to_risk_level(score) == level
