"""
Prometheus Metrics for the Credit Risk Engine.

This module defines all metrics exposed at the /metrics endpoint.
Metrics are categorized into:

1. Business Metrics - For store owners and product
   - Prediction outcomes, customer risk levels, recommended amounts

2. Technical Metrics - For engineering
   - Scoring latency, HTTP traffic
"""
from prometheus_client import Counter, Histogram, Info

# =============================================================================
# SERVICE INFO
# =============================================================================

SERVICE_INFO = Info(
    "credit_risk_service",
    "Service information"
)
SERVICE_INFO.info({
    "version": "0.1.0",
    "service": "credit-risk-engine",
})

# =============================================================================
# BUSINESS METRICS
# =============================================================================

# Counter: Payment predictions by risk level
PREDICTION_TOTAL = Counter(
    "credit_risk_prediction_total",
    "Total payment predictions made",
    ["risk_level"]  # low, medium, high, critical
)

# Histogram: Predicted payment probability
PREDICTION_PROBABILITY = Histogram(
    "credit_risk_prediction_probability",
    "Distribution of predicted payment probabilities (0-100)",
    buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100]
)

# Counter: Customer risk profiles by risk level
RISK_PROFILE_TOTAL = Counter(
    "credit_risk_profile_total",
    "Total customer risk profiles computed",
    ["risk_level"]
)

# Counter: Credit recommendations by justification
RECOMMENDATION_TOTAL = Counter(
    "credit_risk_recommendation_total",
    "Credit amount recommendations by payment-history band",
    ["band"]  # new_customer, excellent_history, ...
)

# =============================================================================
# TECHNICAL METRICS
# =============================================================================

# Histogram: Scoring latency per request
SCORING_LATENCY = Histogram(
    "credit_risk_scoring_latency_seconds",
    "Time to score a snapshot",
    ["operation"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0]
)

# =============================================================================
# HTTP METRICS (Standard)
# =============================================================================

HTTP_REQUESTS = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

HTTP_REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0]
)

# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def record_prediction(risk_level: str, probability: float) -> None:
    """Record a single payment prediction."""
    PREDICTION_TOTAL.labels(risk_level=risk_level).inc()
    PREDICTION_PROBABILITY.observe(probability)


def record_risk_profile(risk_level: str) -> None:
    """Record a computed customer risk profile."""
    RISK_PROFILE_TOTAL.labels(risk_level=risk_level).inc()


def record_recommendation(band: str) -> None:
    """Record a credit amount recommendation."""
    RECOMMENDATION_TOTAL.labels(band=band).inc()


def record_scoring_latency(operation: str, latency_seconds: float) -> None:
    """Record how long a scoring operation took."""
    SCORING_LATENCY.labels(operation=operation).observe(latency_seconds)


def record_http_request(method: str, endpoint: str, status: int, latency_seconds: float) -> None:
    """Record standard HTTP request metrics."""
    HTTP_REQUESTS.labels(method=method, endpoint=endpoint, status=status).inc()
    HTTP_REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(latency_seconds)
