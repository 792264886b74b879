from typing import Any, Dict

from fastapi import APIRouter, Depends
from supabase import Client

from plantnet.auth.security import require_user
from plantnet.errors import Forbidden
from plantnet.infra.storage import get_storage
from . import service
from .models import UserProfileIn, normalize_email

router = APIRouter(tags=["Users"])


@router.post("/user")
async def save_user(
    profile: UserProfileIn,
    user: Dict[str, Any] = Depends(require_user),
    storage: Client = Depends(get_storage),
):
    """Crée le profil à la première connexion, sinon rafraîchit last_logged_in.
    - Seul le titulaire de la session peut enregistrer son propre profil.
    """
    if normalize_email(profile.email) != normalize_email(user.get("email") or ""):
        raise Forbidden()
    return await service.record_login(storage, profile.model_dump(mode="json", exclude_none=True))
