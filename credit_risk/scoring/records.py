"""Record and result types shared by the scoring modules.

Timestamps are milliseconds since the Unix epoch; amounts are in the
store's currency.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from credit_risk.scoring.messages import ReasonCode, RecommendationCode


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class CreditRecord:
    """Credit extended to a customer."""
    id: str
    customer_id: str
    customer_name: str
    amount: float
    paid_amount: float
    remaining_amount: float
    due_date: int
    created_at: int
    interest_rate: Optional[float] = None


@dataclass(frozen=True)
class PaymentRecord:
    """Payment recorded against a credit."""
    id: str
    credit_id: str
    customer_id: str
    amount: float
    created_at: int
    note: Optional[str] = None


@dataclass(frozen=True)
class CreditIncreaseRecord:
    """Amount added to an existing credit."""
    id: str
    credit_id: str
    customer_id: str
    amount: float
    created_at: int
    note: Optional[str] = None


@dataclass
class PaymentPrediction:
    """Likelihood that an outstanding credit gets paid."""
    credit_id: str
    customer_id: str
    customer_name: str
    credit_amount: float
    remaining_amount: float
    due_date: int
    probability: int  # 0-100
    confidence: int  # 0-100
    risk_level: RiskLevel
    days_until_due: int  # negative when overdue
    predicted_payment_date: Optional[int] = None


@dataclass
class CustomerRiskProfile:
    """Aggregate repayment behaviour of one customer."""
    customer_id: str
    customer_name: str
    risk_score: int  # 0-100, higher = riskier
    risk_level: RiskLevel
    total_credits: float
    total_paid: float
    average_payment_delay: float  # days
    on_time_payment_rate: float  # percentage
    recommendation_codes: list[RecommendationCode] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)


@dataclass
class CreditRecommendation:
    """Suggested credit ceiling for a customer's next credit."""
    recommended: float
    max: float
    reason_code: ReasonCode
    reason: str
