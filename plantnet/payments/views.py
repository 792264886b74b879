from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from supabase import Client

from plantnet.auth.security import require_user
from plantnet.infra.storage import get_storage
from plantnet.utils.rate_limit import optional_rate_limit
from . import service
from .pricing import MAX_QUANTITY
from .stripe_client import StripeGateway, get_gateway

router = APIRouter(tags=["Payments"])


class PaymentIntentRequest(BaseModel):
    # Les champs non déclarés (ex: "price") sont ignorés: le prix est recalculé côté serveur
    plantId: UUID
    quantity: int = Field(gt=0, le=MAX_QUANTITY)


@router.post("/create-payment-intent", dependencies=[Depends(optional_rate_limit(times=10, seconds=60))])
async def create_payment_intent(
    req: PaymentIntentRequest,
    user: Dict[str, Any] = Depends(require_user),
    storage: Client = Depends(get_storage),
    gateway: StripeGateway = Depends(get_gateway),
):
    """
    Crée un Payment Intent pour {plantId, quantity}.
    - Sécurité: require_user + rate limit (10 req / 60s)
    - Réponse: {"clientSecret": "..."}; 404 {"message": "Plant Not Found"} si la plante est inconnue
    """
    client_secret = await service.create_payment_intent(
        storage,
        gateway,
        plant_id=str(req.plantId),
        quantity=req.quantity,
        email=user.get("email") or "",
    )
    return {"clientSecret": client_secret}
