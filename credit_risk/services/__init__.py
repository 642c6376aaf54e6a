"""Service layer for the credit risk engine."""
from credit_risk.services.portfolio import CreditNotFoundError, PortfolioService

__all__ = ["CreditNotFoundError", "PortfolioService"]
