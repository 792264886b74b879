"""
Calcul du montant côté serveur (pas de Stripe, pas de DB).
Le prix vient toujours du catalogue; le client ne fournit que l'identifiant et la quantité.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any, Dict

from plantnet.errors import DownstreamFailure, ValidationError

MINOR_UNITS_PER_MAJOR = 100
# Montant maximal accepté par Stripe pour un Payment Intent (unités mineures)
MAX_AMOUNT = 99_999_999
MAX_QUANTITY = 10_000


def unit_price(plant: Dict[str, Any]) -> Decimal:
    """
    Prix unitaire d'une plante (unité majeure).
    - Autorise plant["price"] à être str|float|int.
    - Un prix absent, illisible ou <= 0 est une donnée catalogue invalide.
    """
    try:
        price = Decimal(str(plant.get("price")))
    except (InvalidOperation, ValueError):
        raise DownstreamFailure("invalid catalog price")
    if not price.is_finite() or price <= 0:
        raise DownstreamFailure("invalid catalog price")
    return price


def to_minor_units(price: Decimal, quantity: int) -> int:
    """
    Total en centimes: quantity × price × 100, arrondi au plus proche (demi vers le haut).
    Lève ValidationError si le total dépasse MAX_AMOUNT.
    """
    # Précision large: quantize ne doit jamais échouer, même sur une quantité démesurée
    with localcontext() as ctx:
        ctx.prec = 100
        total = Decimal(str(price)) * quantity * MINOR_UNITS_PER_MAJOR
        amount = total.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    if amount > MAX_AMOUNT:
        raise ValidationError("order total exceeds the maximum amount")
    return int(amount)


def make_metadata(plant_id: str, quantity: int, email: str) -> Dict[str, str]:
    """Métadonnées Stripe (valeurs str) relues lors de l'enregistrement de la commande."""
    return {"plantId": str(plant_id), "quantity": str(quantity), "email": email or ""}
