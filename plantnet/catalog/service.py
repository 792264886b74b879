"""
Cas d'usage 'catalog': lecture du catalogue et publication d'une plante.
Toutes les lectures sont rejouables (idempotentes).
"""
import logging
from typing import Any, Dict, List, Optional

from supabase import Client

from plantnet.errors import NotFound
from plantnet.infra import downstream
from . import repository

logger = logging.getLogger(__name__)

PLANT_NOT_FOUND = "Plant Not Found"


async def list_plants(client: Client) -> List[dict]:
    return await downstream.call("catalog.list_plants", repository.list_plants, client, retryable=True)


async def get_plant(client: Client, plant_id: str) -> Optional[dict]:
    return await downstream.call("catalog.find_plant", repository.find_plant, client, plant_id, retryable=True)


async def require_plant(client: Client, plant_id: str) -> dict:
    plant = await get_plant(client, plant_id)
    if not plant:
        raise NotFound(PLANT_NOT_FOUND)
    return plant


async def add_plant(client: Client, doc: Dict[str, Any], seller: Dict[str, Any]) -> Dict[str, Any]:
    ack = await downstream.call("catalog.insert_plant", repository.insert_plant, client, doc)
    logger.info("catalog.add_plant id=%s seller=%s", ack.get("insertedId"), seller.get("email"))
    return ack
