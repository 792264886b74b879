from typing import Any, Dict

from fastapi import APIRouter, Depends
from supabase import Client

import plantnet.config as config
from plantnet.auth.security import require_user
from plantnet.infra.storage import get_storage
from plantnet.payments.stripe_client import StripeGateway, get_gateway
from . import service
from .models import OrderIn

router = APIRouter(tags=["Orders"])


@router.post("/order")
async def create_order(
    order: OrderIn,
    user: Dict[str, Any] = Depends(require_user),
    storage: Client = Depends(get_storage),
    gateway: StripeGateway = Depends(get_gateway),
):
    """Enregistre la commande soumise après paiement (accusé {acknowledged, insertedId})."""
    return await service.record_order(
        storage,
        gateway,
        order.model_dump(mode="json", exclude_unset=True),
        email=user.get("email") or "",
        verify=config.ORDER_VERIFY_PAYMENT,
    )
