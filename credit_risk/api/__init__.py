"""HTTP API for the credit risk engine."""
from credit_risk.api.routes import router

__all__ = ["router"]
