"""API route handlers for the credit risk engine."""
from dataclasses import asdict
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from credit_risk import metrics
from credit_risk.logging import bind_customer, get_logger, timed_operation
from credit_risk.schemas import (
    CreditRecommendationResponse,
    CustomerRiskProfileResponse,
    PaymentPredictionResponse,
    PortfolioSummaryRequest,
    PortfolioSummaryResponse,
    RiskProfileRequest,
    RiskProfilesRequest,
    SnapshotRequest,
    TimelineEntrySchema,
)
from credit_risk.services.portfolio import PortfolioService

logger = get_logger(__name__)

router = APIRouter(prefix="/v1", tags=["scoring"])

Language = Optional[Literal["fr", "en"]]


def get_portfolio_service() -> PortfolioService:
    """Dependency that provides the scoring service."""
    return PortfolioService()


@router.post("/predictions", response_model=list[PaymentPredictionResponse])
async def predict_outstanding_credits(
    body: SnapshotRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """
    Predict payment of every credit that still has a balance.

    Predictions are returned riskiest first.
    """
    with timed_operation("outstanding_prediction", logger, credit_count=len(body.credits)) as timing:
        predictions = service.predict_outstanding(
            body.credit_records(),
            body.payment_records(),
            body.credit_increase_records(),
            now_ms=body.as_of,
        )
    metrics.record_scoring_latency("predictions", timing.duration_seconds)

    for prediction in predictions:
        metrics.record_prediction(prediction.risk_level.value, prediction.probability)

    return [PaymentPredictionResponse.from_prediction(p) for p in predictions]


@router.post("/predictions/{credit_id}", response_model=PaymentPredictionResponse)
async def predict_credit(
    credit_id: str,
    body: SnapshotRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Predict payment of a single credit of the snapshot."""
    with timed_operation("credit_prediction", logger, credit_id=credit_id) as timing:
        prediction = service.predict_credit(
            credit_id,
            body.credit_records(),
            body.payment_records(),
            body.credit_increase_records(),
            now_ms=body.as_of,
        )
    metrics.record_scoring_latency("prediction", timing.duration_seconds)
    metrics.record_prediction(prediction.risk_level.value, prediction.probability)

    logger.info(
        "prediction_computed",
        credit_id=credit_id,
        customer_id=prediction.customer_id,
        probability=prediction.probability,
        confidence=prediction.confidence,
        risk_level=prediction.risk_level.value,
        days_until_due=prediction.days_until_due,
    )

    return PaymentPredictionResponse.from_prediction(prediction)


@router.post(
    "/customers/{customer_id}/risk-profile",
    response_model=CustomerRiskProfileResponse,
)
async def customer_risk_profile(
    customer_id: str,
    body: RiskProfileRequest,
    language: Language = Query(None, description="Language of recommendation texts"),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Compute the risk profile of one customer."""
    bind_customer(customer_id)

    with timed_operation("risk_profile", logger) as timing:
        profile = service.profile_customer(
            customer_id,
            body.customer_name,
            body.credit_records(),
            body.payment_records(),
            language=language,
            now_ms=body.as_of,
        )
    metrics.record_scoring_latency("risk_profile", timing.duration_seconds)
    metrics.record_risk_profile(profile.risk_level.value)

    logger.info(
        "risk_profile_computed",
        risk_score=profile.risk_score,
        risk_level=profile.risk_level.value,
        on_time_payment_rate=round(profile.on_time_payment_rate, 2),
        average_payment_delay=round(profile.average_payment_delay, 2),
    )

    return CustomerRiskProfileResponse.from_profile(profile)


@router.post("/risk-profiles", response_model=list[CustomerRiskProfileResponse])
async def customer_risk_profiles(
    body: RiskProfilesRequest,
    language: Language = Query(None, description="Language of recommendation texts"),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Compute risk profiles for a list of customers, riskiest first."""
    with timed_operation("risk_profiles", logger, customer_count=len(body.customers)) as timing:
        profiles = service.profile_customers(
            [(c.id, c.name) for c in body.customers],
            body.credit_records(),
            body.payment_records(),
            language=language,
            now_ms=body.as_of,
        )
    metrics.record_scoring_latency("risk_profiles", timing.duration_seconds)

    for profile in profiles:
        metrics.record_risk_profile(profile.risk_level.value)

    return [CustomerRiskProfileResponse.from_profile(p) for p in profiles]


@router.post(
    "/customers/{customer_id}/credit-recommendation",
    response_model=CreditRecommendationResponse,
)
async def credit_recommendation(
    customer_id: str,
    body: SnapshotRequest,
    language: Language = Query(None, description="Language of the justification"),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Recommend the next credit amount for a customer."""
    bind_customer(customer_id)

    recommendation = service.recommend(
        customer_id,
        body.credit_records(),
        body.payment_records(),
        language=language,
    )
    metrics.record_recommendation(recommendation.reason_code.value)

    logger.info(
        "credit_recommendation_computed",
        recommended=recommendation.recommended,
        max=recommendation.max,
        band=recommendation.reason_code.value,
    )

    return CreditRecommendationResponse.from_recommendation(recommendation)


@router.post("/portfolio/summary", response_model=PortfolioSummaryResponse)
async def portfolio_summary(
    body: PortfolioSummaryRequest,
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Totals issued, paid and overdue across the store's credits."""
    summary = service.summarize(
        body.credit_records(),
        active_customers=body.active_customers,
        now_ms=body.as_of,
    )

    logger.info(
        "portfolio_summarized",
        credit_count=len(body.credits),
        overdue_credits=summary.overdue_credits,
    )

    return PortfolioSummaryResponse(**asdict(summary))


@router.post("/credits/{credit_id}/timeline", response_model=list[TimelineEntrySchema])
async def credit_timeline(
    credit_id: str,
    body: SnapshotRequest,
    start: Optional[int] = Query(None, description="Earliest entry time in epoch milliseconds"),
    end: Optional[int] = Query(None, description="Latest entry time in epoch milliseconds"),
    service: PortfolioService = Depends(get_portfolio_service),
):
    """Payments and credit increases of one credit, newest first."""
    entries = service.credit_timeline(
        credit_id,
        body.payment_records(),
        body.credit_increase_records(),
        start_ms=start,
        end_ms=end,
    )
    return [TimelineEntrySchema(**asdict(e)) for e in entries]
