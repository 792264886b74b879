"""Couche service du domaine Utilisateurs: enregistrement idempotent des connexions.

Un seul profil par email:
- première connexion: insertion du profil (role "customer", created_at, last_logged_in)
- connexions suivantes: mise à jour de last_logged_in uniquement
L'index unique sur users.email ferme la course entre deux premières connexions
simultanées: l'insertion perdante reçoit Conflict et bascule sur la mise à jour.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from supabase import Client

from plantnet.config import DEFAULT_ROLE
from plantnet.errors import Conflict
from plantnet.infra import downstream
from . import repository
from .models import normalize_email

logger = logging.getLogger(__name__)

# Champs gérés par le serveur, jamais repris du payload client
SERVER_FIELDS = ("id", "role", "created_at", "last_logged_in")


def _now_iso(now: Optional[datetime] = None) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


async def _refresh_login(client: Client, email: str, now: Optional[datetime]) -> Dict[str, Any]:
    return await downstream.call(
        "users.update_last_login",
        repository.update_last_login,
        client,
        email,
        _now_iso(now),
        retryable=True,
    )


async def record_login(client: Client, profile: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Crée ou rafraîchit le profil de l'utilisateur connecté.
    - profile: payload client validé (email obligatoire, champs libres: name, image...)
    - Retour: accusé d'insertion ou de mise à jour
    """
    email = normalize_email(profile["email"])
    existing = await downstream.call(
        "users.find_by_email", repository.find_user_by_email, client, email, retryable=True
    )
    if existing:
        return await _refresh_login(client, email, now)

    doc = {k: v for k, v in profile.items() if k not in SERVER_FIELDS}
    stamp = _now_iso(now)
    doc.update(email=email, role=DEFAULT_ROLE, created_at=stamp, last_logged_in=stamp)
    try:
        # Rejouable: une seconde insertion tombe sur l'index unique et devient une mise à jour
        ack = await downstream.call("users.insert", repository.insert_user, client, doc, retryable=True)
    except Conflict:
        logger.info("users.record_login concurrent first login email=%s, refreshing last login", email)
        return await _refresh_login(client, email, now)
    logger.info("users.record_login created profile email=%s", email)
    return ack


async def get_role(client: Client, email: str) -> Optional[str]:
    profile = await downstream.call(
        "users.find_by_email", repository.find_user_by_email, client, email, retryable=True
    )
    return (profile or {}).get("role")
