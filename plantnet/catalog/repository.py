"""
Accès aux données du catalogue (table plants).
Lecture par identifiant pour la fiche produit et comme source de prix du checkout.
Les champs descriptifs hors schéma sont stockés dans la colonne jsonb "details".
"""
from typing import Any, Dict, List, Optional
from supabase import Client

from plantnet.infra.acks import insert_ack
from plantnet.infra.columns import merge_columns, split_columns
from plantnet.infra.storage import PLANTS_TABLE

PLANT_COLUMNS = ("name", "category", "description", "image", "price", "quantity", "seller")
DETAILS_COLUMN = "details"


def list_plants(client: Client) -> List[dict]:
    res = client.table(PLANTS_TABLE).select("*").execute()
    return [merge_columns(row, DETAILS_COLUMN) for row in (res.data or [])]


def find_plant(client: Client, plant_id: str) -> Optional[dict]:
    """
    Récupère une plante par id.
    - Retour: dict ou None si introuvable
    """
    res = client.table(PLANTS_TABLE).select("*").eq("id", plant_id).limit(1).execute()
    rows = res.data or []
    return merge_columns(rows[0], DETAILS_COLUMN) if rows else None


def insert_plant(client: Client, doc: Dict[str, Any]) -> Dict[str, Any]:
    row = split_columns(doc, PLANT_COLUMNS, DETAILS_COLUMN)
    res = client.table(PLANTS_TABLE).insert(row).execute()
    return insert_ack(res)
