from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class Customer(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: EmailStr
    name: Optional[str] = None


class OrderIn(BaseModel):
    """Commande soumise par le client après paiement; enregistrée telle quelle.
    - transactionId: identifiant du Payment Intent Stripe (pi_...)
    - price: montant affiché côté client, informatif uniquement
    """
    model_config = ConfigDict(extra="allow")

    plantId: UUID
    quantity: int = Field(gt=0)
    customer: Optional[Customer] = None
    transactionId: Optional[str] = None
    price: Optional[float] = None
