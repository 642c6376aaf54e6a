"""Pydantic schemas for request/response validation."""
from dataclasses import asdict
from typing import Literal, Optional

from pydantic import BaseModel, Field

from credit_risk.scoring import (
    CreditIncreaseRecord,
    CreditRecommendation,
    CreditRecord,
    CustomerRiskProfile,
    PaymentPrediction,
    PaymentRecord,
    RiskLevel,
)
from credit_risk.scoring.messages import ReasonCode, RecommendationCode


class CreditIn(BaseModel):
    """
    A credit as stored by the store's data layer.

    A stored status field, if sent, is ignored: status is always derived
    from the balance and due date.
    """
    id: str
    customer_id: str
    customer_name: str
    amount: float = Field(..., ge=0, description="Original credit amount")
    paid_amount: float = Field(0, ge=0, description="Amount paid so far")
    remaining_amount: float = Field(..., description="Amount still owed")
    due_date: int = Field(..., description="Due date in epoch milliseconds")
    created_at: int = Field(..., description="Creation time in epoch milliseconds")
    interest_rate: Optional[float] = None

    def to_record(self) -> CreditRecord:
        return CreditRecord(**self.model_dump())


class PaymentIn(BaseModel):
    """A payment recorded against a credit."""
    id: str
    credit_id: str
    customer_id: str
    amount: float = Field(..., ge=0)
    note: Optional[str] = None
    created_at: int = Field(..., description="Payment time in epoch milliseconds")

    def to_record(self) -> PaymentRecord:
        return PaymentRecord(**self.model_dump())


class CreditIncreaseIn(BaseModel):
    """An amount added to an existing credit."""
    id: str
    credit_id: str
    customer_id: str
    amount: float = Field(..., ge=0)
    note: Optional[str] = None
    created_at: int = Field(..., description="Increase time in epoch milliseconds")

    def to_record(self) -> CreditIncreaseRecord:
        return CreditIncreaseRecord(**self.model_dump())


class CustomerIn(BaseModel):
    id: str
    name: str


class SnapshotRequest(BaseModel):
    """Records of one store, already scoped to its owner."""
    credits: list[CreditIn] = Field(default_factory=list)
    payments: list[PaymentIn] = Field(default_factory=list)
    credit_increases: list[CreditIncreaseIn] = Field(default_factory=list)
    as_of: Optional[int] = Field(
        None, description="Reference time in epoch milliseconds (defaults to now)"
    )

    def credit_records(self) -> list[CreditRecord]:
        return [c.to_record() for c in self.credits]

    def payment_records(self) -> list[PaymentRecord]:
        return [p.to_record() for p in self.payments]

    def credit_increase_records(self) -> list[CreditIncreaseRecord]:
        return [i.to_record() for i in self.credit_increases]


class RiskProfileRequest(SnapshotRequest):
    """Request body for POST /v1/customers/{customer_id}/risk-profile."""
    customer_name: str = Field(..., description="Display name of the customer")


class RiskProfilesRequest(SnapshotRequest):
    """Request body for POST /v1/risk-profiles."""
    customers: list[CustomerIn] = Field(default_factory=list)


class PortfolioSummaryRequest(SnapshotRequest):
    """Request body for POST /v1/portfolio/summary."""
    active_customers: int = Field(0, ge=0, description="Number of customers of the store")


class PaymentPredictionResponse(BaseModel):
    credit_id: str
    customer_id: str
    customer_name: str
    credit_amount: float
    remaining_amount: float
    due_date: int
    probability: int = Field(..., ge=0, le=100)
    confidence: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    days_until_due: int
    predicted_payment_date: Optional[int] = None

    @classmethod
    def from_prediction(cls, prediction: PaymentPrediction) -> "PaymentPredictionResponse":
        return cls(**asdict(prediction))


class CustomerRiskProfileResponse(BaseModel):
    customer_id: str
    customer_name: str
    risk_score: int = Field(..., ge=0, le=100)
    risk_level: RiskLevel
    total_credits: float
    total_paid: float
    average_payment_delay: float
    on_time_payment_rate: float
    recommendation_codes: list[RecommendationCode]
    recommendations: list[str]

    @classmethod
    def from_profile(cls, profile: CustomerRiskProfile) -> "CustomerRiskProfileResponse":
        return cls(**asdict(profile))


class CreditRecommendationResponse(BaseModel):
    recommended: float
    max: float
    reason_code: ReasonCode
    reason: str

    @classmethod
    def from_recommendation(
        cls, recommendation: CreditRecommendation
    ) -> "CreditRecommendationResponse":
        return cls(**asdict(recommendation))


class PortfolioSummaryResponse(BaseModel):
    total_credits: float
    total_paid: float
    overdue_credits: int
    total_overdue: float
    active_customers: int


class TimelineEntrySchema(BaseModel):
    id: str
    kind: Literal["payment", "credit_increase"]
    amount: float
    note: Optional[str] = None
    created_at: int
