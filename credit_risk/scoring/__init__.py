"""Payment prediction and risk scoring for store credit."""
from credit_risk.scoring.credit_limit import get_recommended_credit_amount, recommend_credit_amount
from credit_risk.scoring.prediction import PaymentPredictor, predict_payment
from credit_risk.scoring.records import (
    CreditIncreaseRecord,
    CreditRecommendation,
    CreditRecord,
    CustomerRiskProfile,
    PaymentPrediction,
    PaymentRecord,
    RiskLevel,
)
from credit_risk.scoring.risk_profile import RiskProfiler, calculate_customer_risk_profile

__all__ = [
    "PaymentPredictor",
    "RiskProfiler",
    "predict_payment",
    "calculate_customer_risk_profile",
    "recommend_credit_amount",
    "get_recommended_credit_amount",
    "CreditRecord",
    "PaymentRecord",
    "CreditIncreaseRecord",
    "PaymentPrediction",
    "CustomerRiskProfile",
    "CreditRecommendation",
    "RiskLevel",
]
