"""
Recommendation and justification codes with their display texts.

Scoring produces codes only; text is looked up here at the boundary so the
same result can be shown in French (the store default) or English.
"""
from enum import Enum
from typing import Iterable


class RecommendationCode(str, Enum):
    """Actions suggested by a customer risk profile."""
    # Critical band (score >= 75)
    LIMIT_NEW_CREDIT = "limit_new_credit"
    CONTACT_IMMEDIATELY = "contact_immediately"
    OFFER_INSTALMENT_PLAN = "offer_instalment_plan"
    # High band (score >= 50)
    MONITOR_PAYMENTS = "monitor_payments"
    SEND_DUE_REMINDERS = "send_due_reminders"
    LIMIT_CREDIT_AMOUNTS = "limit_credit_amounts"
    # Medium band (score >= 25)
    KEEP_REGULAR_CONTACT = "keep_regular_contact"
    OFFER_EARLY_PAYMENT_INCENTIVES = "offer_early_payment_incentives"
    # Low band
    OFFER_PREFERENTIAL_TERMS = "offer_preferential_terms"
    CONSIDER_RAISING_LIMITS = "consider_raising_limits"
    # Conditional extras
    OFFER_FLEXIBLE_PLAN = "offer_flexible_plan"
    ENABLE_AUTOMATIC_REMINDERS = "enable_automatic_reminders"


class ReasonCode(str, Enum):
    """Justifications attached to a credit amount recommendation."""
    NEW_CUSTOMER = "new_customer"
    EXCELLENT_HISTORY = "excellent_history"
    GOOD_HISTORY = "good_history"
    AVERAGE_HISTORY = "average_history"
    WEAK_HISTORY = "weak_history"


SUPPORTED_LANGUAGES = ("fr", "en")

MESSAGES: dict[str, dict[Enum, str]] = {
    "fr": {
        RecommendationCode.LIMIT_NEW_CREDIT: "Client à haut risque - Limiter les nouveaux crédits",
        RecommendationCode.CONTACT_IMMEDIATELY: "Contacter le client immédiatement pour régulariser",
        RecommendationCode.OFFER_INSTALMENT_PLAN: "Envisager un plan de paiement échelonné",
        RecommendationCode.MONITOR_PAYMENTS: "Surveiller de près les paiements",
        RecommendationCode.SEND_DUE_REMINDERS: "Envoyer des rappels avant l'échéance",
        RecommendationCode.LIMIT_CREDIT_AMOUNTS: "Limiter les montants de crédit",
        RecommendationCode.KEEP_REGULAR_CONTACT: "Maintenir une communication régulière",
        RecommendationCode.OFFER_EARLY_PAYMENT_INCENTIVES: "Offrir des incitations pour paiement anticipé",
        RecommendationCode.OFFER_PREFERENTIAL_TERMS: "Client fiable - Peut bénéficier de conditions préférentielles",
        RecommendationCode.CONSIDER_RAISING_LIMITS: "Envisager d'augmenter les limites de crédit",
        RecommendationCode.OFFER_FLEXIBLE_PLAN: "Proposer un plan de paiement plus flexible",
        RecommendationCode.ENABLE_AUTOMATIC_REMINDERS: "Mettre en place un système de rappels automatiques",
        ReasonCode.NEW_CUSTOMER: "Nouveau client - Montant initial recommandé",
        ReasonCode.EXCELLENT_HISTORY: "Excellent historique de paiement - Peut supporter un crédit plus élevé",
        ReasonCode.GOOD_HISTORY: "Bon historique de paiement - Augmentation modérée recommandée",
        ReasonCode.AVERAGE_HISTORY: "Historique moyen - Maintenir le même niveau",
        ReasonCode.WEAK_HISTORY: "Historique de paiement faible - Réduire le montant recommandé",
    },
    "en": {
        RecommendationCode.LIMIT_NEW_CREDIT: "High-risk customer - Limit new credit",
        RecommendationCode.CONTACT_IMMEDIATELY: "Contact the customer immediately to settle the balance",
        RecommendationCode.OFFER_INSTALMENT_PLAN: "Consider an instalment payment plan",
        RecommendationCode.MONITOR_PAYMENTS: "Monitor payments closely",
        RecommendationCode.SEND_DUE_REMINDERS: "Send reminders before the due date",
        RecommendationCode.LIMIT_CREDIT_AMOUNTS: "Limit credit amounts",
        RecommendationCode.KEEP_REGULAR_CONTACT: "Keep regular contact",
        RecommendationCode.OFFER_EARLY_PAYMENT_INCENTIVES: "Offer incentives for early payment",
        RecommendationCode.OFFER_PREFERENTIAL_TERMS: "Reliable customer - Eligible for preferential terms",
        RecommendationCode.CONSIDER_RAISING_LIMITS: "Consider raising credit limits",
        RecommendationCode.OFFER_FLEXIBLE_PLAN: "Offer a more flexible payment plan",
        RecommendationCode.ENABLE_AUTOMATIC_REMINDERS: "Set up automatic payment reminders",
        ReasonCode.NEW_CUSTOMER: "New customer - Recommended starting amount",
        ReasonCode.EXCELLENT_HISTORY: "Excellent payment history - Can support a higher credit",
        ReasonCode.GOOD_HISTORY: "Good payment history - Moderate increase recommended",
        ReasonCode.AVERAGE_HISTORY: "Average history - Keep the same level",
        ReasonCode.WEAK_HISTORY: "Weak payment history - Reduce the recommended amount",
    },
}


def render(code: Enum, language: str = "fr") -> str:
    """Return the display text for a code, falling back to French."""
    catalog = MESSAGES.get(language, MESSAGES["fr"])
    return catalog[code]


def render_all(codes: Iterable[Enum], language: str = "fr") -> list[str]:
    """Render codes in order."""
    return [render(code, language) for code in codes]
