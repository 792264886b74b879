from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PlantIn(BaseModel):
    """Fiche plante publiée par un vendeur; les champs descriptifs libres sont conservés."""
    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    price: float = Field(gt=0)
    quantity: Optional[int] = Field(default=None, ge=0)
    category: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
