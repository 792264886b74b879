"""
Adaptateur Stripe: centralise les appels Payment Intent.
Une instance est créée au démarrage (lifespan) et injectée via get_gateway.
"""
from typing import Any, Dict, Optional

import stripe
from fastapi import Request


def _as_dict(obj: Any) -> Dict[str, Any]:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return dict(obj)
    to_dict = getattr(obj, "to_dict", None)
    return to_dict() if callable(to_dict) else {}


def _intent_dict(intent: Any) -> Dict[str, Any]:
    return {
        "id": getattr(intent, "id", None),
        "client_secret": getattr(intent, "client_secret", None),
        "amount": getattr(intent, "amount", None),
        "currency": getattr(intent, "currency", None),
        "status": getattr(intent, "status", None),
        "metadata": _as_dict(getattr(intent, "metadata", None)),
    }


class StripeGateway:
    def __init__(self, api_key: str):
        if not api_key:
            raise RuntimeError("STRIPE_SECRET_KEY manquant pour StripeGateway")
        self.api_key = api_key

    def create_intent(
        self,
        *,
        amount: int,
        currency: str,
        metadata: Dict[str, str],
        idempotency_key: str,
    ) -> Dict[str, Any]:
        """
        Crée un Payment Intent Stripe.
        - amount: total en unités mineures (centimes)
        - automatic_payment_methods activé: Stripe choisit les moyens de paiement
        - idempotency_key: rend l'appel rejouable sans double création
        Retour: dict {id, client_secret, amount, currency, status, metadata}
        """
        intent = stripe.PaymentIntent.create(
            api_key=self.api_key,
            amount=amount,
            currency=currency,
            automatic_payment_methods={"enabled": True},
            metadata=metadata,
            idempotency_key=idempotency_key,
        )
        return _intent_dict(intent)

    def retrieve_intent(self, intent_id: str) -> Optional[Dict[str, Any]]:
        """Récupère un Payment Intent; None si Stripe ne le connaît pas."""
        try:
            intent = stripe.PaymentIntent.retrieve(intent_id, api_key=self.api_key)
        except stripe.InvalidRequestError as e:
            if getattr(e, "code", None) == "resource_missing":
                return None
            raise
        return _intent_dict(intent)


def get_gateway(request: Request) -> StripeGateway:
    return request.app.state.gateway
