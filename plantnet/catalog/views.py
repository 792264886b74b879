from typing import Any, Dict
from uuid import UUID

from fastapi import APIRouter, Depends
from supabase import Client

from plantnet.auth.security import require_seller
from plantnet.infra.storage import get_storage
from . import service
from .models import PlantIn

router = APIRouter(tags=["Catalog"])


@router.get("/plants")
async def get_plants(storage: Client = Depends(get_storage)):
    return await service.list_plants(storage)


@router.get("/plant/{plant_id}")
async def get_plant(plant_id: UUID, storage: Client = Depends(get_storage)):
    """Fiche plante; null si l'identifiant (UUID valide) est inconnu."""
    return await service.get_plant(storage, str(plant_id))


@router.post("/add-plant")
async def add_plant(
    plant: PlantIn,
    seller: Dict[str, Any] = Depends(require_seller),
    storage: Client = Depends(get_storage),
):
    """Publication d'une plante (rôle seller ou admin requis)."""
    return await service.add_plant(storage, plant.model_dump(mode="json", exclude_unset=True), seller)
