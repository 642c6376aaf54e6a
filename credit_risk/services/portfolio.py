"""Portfolio-level scoring over a store's credit snapshot."""
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import structlog

from credit_risk.config import Settings, settings as default_settings
from credit_risk.scoring import (
    CreditIncreaseRecord,
    CreditRecommendation,
    CreditRecord,
    CustomerRiskProfile,
    PaymentPrediction,
    PaymentPredictor,
    PaymentRecord,
    RiskProfiler,
    recommend_credit_amount,
)
from credit_risk.scoring.history import current_time_ms
from credit_risk.scoring.status import STATUS_OVERDUE, credit_status

logger = structlog.get_logger()

TIMELINE_PAYMENT = "payment"
TIMELINE_CREDIT_INCREASE = "credit_increase"


class CreditNotFoundError(Exception):
    """The requested credit is not part of the submitted snapshot."""

    def __init__(self, credit_id: str):
        self.credit_id = credit_id
        self.detail = f"Credit not found: {credit_id}"
        super().__init__(self.detail)


@dataclass
class PortfolioSummary:
    """Headline figures of a store's credit book."""
    total_credits: float
    total_paid: float
    overdue_credits: int
    total_overdue: float
    active_customers: int


@dataclass
class TimelineEntry:
    """A payment or credit increase in a credit's history."""
    id: str
    kind: str
    amount: float
    created_at: int
    note: Optional[str] = None


class PortfolioService:
    """
    Runs the scoring engine over a whole store snapshot.

    This service orchestrates:
    1. Predictions for every credit that still has a balance
    2. Risk profiles for a list of customers
    3. Credit amount recommendations
    4. Portfolio summary figures and per-credit timelines
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the portfolio service.

        Args:
            settings: Application settings (defaults to the environment settings)
        """
        self.settings = settings or default_settings
        self.predictor = PaymentPredictor(
            matching=self.settings.payment_matching,
            match_window_days=self.settings.payment_match_window_days,
        )

    def profiler(self, language: Optional[str] = None) -> RiskProfiler:
        return RiskProfiler(
            matching=self.settings.payment_matching,
            match_window_days=self.settings.payment_match_window_days,
            language=language or self.settings.default_language,
        )

    def predict_outstanding(
        self,
        credits: Sequence[CreditRecord],
        payments: Sequence[PaymentRecord] = (),
        credit_increases: Sequence[CreditIncreaseRecord] = (),
        now_ms: Optional[int] = None,
    ) -> list[PaymentPrediction]:
        """
        Predict payment of every credit with a remaining balance.

        Returns predictions riskiest first: lowest probability, then
        earliest due date.
        """
        now_ms = current_time_ms() if now_ms is None else now_ms
        outstanding = [c for c in credits if c.remaining_amount > 0]

        predictions = [
            self._predict(credit, credits, payments, credit_increases, now_ms)
            for credit in outstanding
        ]
        predictions.sort(key=lambda p: (p.probability, p.due_date))

        logger.info(
            "outstanding_credits_predicted",
            credit_count=len(credits),
            outstanding_count=len(outstanding),
        )
        return predictions

    def predict_credit(
        self,
        credit_id: str,
        credits: Sequence[CreditRecord],
        payments: Sequence[PaymentRecord] = (),
        credit_increases: Sequence[CreditIncreaseRecord] = (),
        now_ms: Optional[int] = None,
    ) -> PaymentPrediction:
        """Predict payment of one credit of the snapshot."""
        credit = next((c for c in credits if c.id == credit_id), None)
        if credit is None:
            raise CreditNotFoundError(credit_id)

        now_ms = current_time_ms() if now_ms is None else now_ms
        return self._predict(credit, credits, payments, credit_increases, now_ms)

    def profile_customer(
        self,
        customer_id: str,
        customer_name: str,
        credits: Sequence[CreditRecord],
        payments: Sequence[PaymentRecord] = (),
        language: Optional[str] = None,
        now_ms: Optional[int] = None,
    ) -> CustomerRiskProfile:
        return self.profiler(language).profile(
            customer_id, customer_name, credits, payments, now_ms=now_ms
        )

    def profile_customers(
        self,
        customers: Iterable[tuple[str, str]],
        credits: Sequence[CreditRecord],
        payments: Sequence[PaymentRecord] = (),
        language: Optional[str] = None,
        now_ms: Optional[int] = None,
    ) -> list[CustomerRiskProfile]:
        """
        Profile each (customer_id, customer_name) pair.

        Returns profiles riskiest first.
        """
        now_ms = current_time_ms() if now_ms is None else now_ms
        profiler = self.profiler(language)
        profiles = [
            profiler.profile(customer_id, customer_name, credits, payments, now_ms=now_ms)
            for customer_id, customer_name in customers
        ]
        profiles.sort(key=lambda p: p.risk_score, reverse=True)
        return profiles

    def recommend(
        self,
        customer_id: str,
        credits: Sequence[CreditRecord],
        payments: Sequence[PaymentRecord] = (),
        language: Optional[str] = None,
    ) -> CreditRecommendation:
        return recommend_credit_amount(
            customer_id,
            credits,
            payments,
            language=language or self.settings.default_language,
        )

    def summarize(
        self,
        credits: Sequence[CreditRecord],
        active_customers: int = 0,
        now_ms: Optional[int] = None,
    ) -> PortfolioSummary:
        """Totals issued and paid, and what is overdue."""
        now_ms = current_time_ms() if now_ms is None else now_ms
        overdue = [c for c in credits if credit_status(c, now_ms) == STATUS_OVERDUE]

        return PortfolioSummary(
            total_credits=sum(c.amount for c in credits),
            total_paid=sum(c.paid_amount for c in credits),
            overdue_credits=len(overdue),
            total_overdue=sum(c.remaining_amount for c in overdue),
            active_customers=active_customers,
        )

    def credit_timeline(
        self,
        credit_id: str,
        payments: Sequence[PaymentRecord] = (),
        credit_increases: Sequence[CreditIncreaseRecord] = (),
        start_ms: Optional[int] = None,
        end_ms: Optional[int] = None,
    ) -> list[TimelineEntry]:
        """
        Payments and increases of one credit, newest first.

        start_ms and end_ms are inclusive bounds on the entry's creation time.
        """
        entries = [
            TimelineEntry(p.id, TIMELINE_PAYMENT, p.amount, p.created_at, p.note)
            for p in payments
            if p.credit_id == credit_id
        ]
        entries.extend(
            TimelineEntry(i.id, TIMELINE_CREDIT_INCREASE, i.amount, i.created_at, i.note)
            for i in credit_increases
            if i.credit_id == credit_id
        )

        if start_ms is not None:
            entries = [e for e in entries if e.created_at >= start_ms]
        if end_ms is not None:
            entries = [e for e in entries if e.created_at <= end_ms]

        return sorted(entries, key=lambda e: e.created_at, reverse=True)

    def _predict(
        self,
        credit: CreditRecord,
        credits: Sequence[CreditRecord],
        payments: Sequence[PaymentRecord],
        credit_increases: Sequence[CreditIncreaseRecord],
        now_ms: int,
    ) -> PaymentPrediction:
        return self.predictor.predict(
            credit,
            [p for p in payments if p.credit_id == credit.id],
            [i for i in credit_increases if i.credit_id == credit.id],
            credits,
            payments,
            now_ms=now_ms,
        )
