"""
Cas d'usage 'orders': enregistrement d'une commande après paiement.

La commande est stockée telle que soumise. Quand la vérification est active
(ORDER_VERIFY_PAYMENT), elle doit référencer un Payment Intent Stripe réussi
émis pour la même plante et la même quantité; sinon elle est refusée (Conflict).
Aucune détection de doublon: chaque appel ajoute une ligne.
"""
import logging
from typing import Any, Dict

from supabase import Client

from plantnet.errors import Conflict, Forbidden, ValidationError
from plantnet.infra import downstream
from plantnet.payments.stripe_client import StripeGateway
from plantnet.users.models import normalize_email
from . import repository

logger = logging.getLogger(__name__)

PAYMENT_SUCCEEDED = "succeeded"


async def verify_payment(gateway: StripeGateway, order: Dict[str, Any], email: str) -> None:
    intent_id = order.get("transactionId")
    if not intent_id:
        raise ValidationError("transactionId is required")
    intent = await downstream.call("stripe.retrieve_intent", gateway.retrieve_intent, intent_id, retryable=True)
    if not intent:
        raise ValidationError("unknown transactionId")
    if intent.get("status") != PAYMENT_SUCCEEDED:
        raise Conflict("payment not completed")
    meta = intent.get("metadata") or {}
    if meta.get("plantId") != str(order.get("plantId")) or meta.get("quantity") != str(order.get("quantity")):
        raise Conflict("order does not match payment")
    if meta.get("email") and meta.get("email") != email:
        raise Conflict("payment belongs to another user")


async def record_order(
    client: Client,
    gateway: StripeGateway,
    order: Dict[str, Any],
    *,
    email: str,
    verify: bool,
) -> Dict[str, Any]:
    """
    Enregistre la commande et renvoie l'accusé d'insertion.
    - order: document client (champs inconnus conservés)
    - email: email de la session; doit correspondre à customer.email s'il est fourni
    - verify: contrôle du Payment Intent Stripe avant insertion
    """
    customer_email = (order.get("customer") or {}).get("email")
    if customer_email and normalize_email(customer_email) != normalize_email(email):
        raise Forbidden("order customer does not match session")
    if verify:
        await verify_payment(gateway, order, email)

    # Insertion non rejouable: un timeout après écriture créerait un doublon
    ack = await downstream.call(
        "orders.insert", repository.insert_order, client, document=order, customer_email=normalize_email(email)
    )
    logger.info("orders.record id=%s plant_id=%s quantity=%s email=%s", ack.get("insertedId"), order.get("plantId"), order.get("quantity"), email)
    return ack
