"""
Cas d'usage 'payments': orchestre catalogue, calcul du prix et Stripe.
"""
import logging
from uuid import uuid4

from supabase import Client

from plantnet.config import PAYMENT_CURRENCY
from plantnet.catalog import service as catalog_service
from plantnet.infra import downstream
from . import pricing
from .stripe_client import StripeGateway

logger = logging.getLogger(__name__)


async def create_payment_intent(
    client: Client,
    gateway: StripeGateway,
    *,
    plant_id: str,
    quantity: int,
    email: str,
) -> str:
    """
    Crée le Payment Intent d'un achat et renvoie uniquement le client_secret.
    Étapes:
      1) Charger la plante (NotFound "Plant Not Found" sans appel Stripe si absente)
      2) Calculer le total en centimes à partir du prix catalogue
      3) Créer l'intent Stripe (rejouable grâce à l'idempotency_key)
    """
    plant = await catalog_service.require_plant(client, plant_id)
    amount = pricing.to_minor_units(pricing.unit_price(plant), quantity)
    intent = await downstream.call(
        "stripe.create_intent",
        gateway.create_intent,
        amount=amount,
        currency=PAYMENT_CURRENCY,
        metadata=pricing.make_metadata(plant_id, quantity, email),
        idempotency_key=str(uuid4()),
        retryable=True,
    )
    logger.info("payments.create_intent id=%s plant_id=%s quantity=%s amount=%s", intent.get("id"), plant_id, quantity, amount)
    return intent["client_secret"]
