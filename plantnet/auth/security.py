from typing import Any, Dict

from fastapi import Depends, Request
from supabase import Client

from plantnet.config import TOKEN_COOKIE_NAME, SELLER_ROLES
from plantnet.errors import Forbidden, Unauthenticated
from plantnet.infra.storage import get_storage
from plantnet.users import service as users_service
from .credentials import verify_token


def get_current_user(request: Request) -> Dict[str, Any]:
    token = request.cookies.get(TOKEN_COOKIE_NAME)
    if not token:
        raise Unauthenticated()
    claims = verify_token(token)
    request.state.user = claims
    return claims


def require_user(user: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, Any]:
    return user


async def require_seller(
    user: Dict[str, Any] = Depends(require_user),
    storage: Client = Depends(get_storage),
) -> Dict[str, Any]:
    # Le rôle vit dans le profil stocké, pas dans le jeton (il peut changer après émission)
    role = await users_service.get_role(storage, user.get("email") or "")
    if role not in SELLER_ROLES:
        raise Forbidden()
    return {**user, "role": role}
