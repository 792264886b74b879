"""Couche d’accès aux données (Supabase) pour le domaine Utilisateurs.
Table users: email (index unique, en minuscules), role, created_at, last_logged_in, name, image;
les autres champs de profil envoyés par le client sont rangés dans la colonne jsonb "profile".
Les erreurs Supabase ne sont pas masquées ici: elles sont classées par plantnet.infra.downstream.
"""
from typing import Any, Dict, Optional
from supabase import Client

from plantnet.infra.acks import insert_ack, update_ack
from plantnet.infra.columns import merge_columns, split_columns
from plantnet.infra.storage import USERS_TABLE
from .models import normalize_email

USER_COLUMNS = ("email", "name", "image", "role", "created_at", "last_logged_in")
PROFILE_COLUMN = "profile"


def find_user_by_email(client: Client, email: str) -> Optional[dict]:
    """Récupère un profil par email (insensible à la casse).
    - Retour: dict utilisateur ou None si introuvable
    """
    email = normalize_email(email)
    if not email:
        return None
    res = client.table(USERS_TABLE).select("*").eq("email", email).limit(1).execute()
    rows = res.data or []
    return merge_columns(rows[0], PROFILE_COLUMN) if rows else None


def insert_user(client: Client, doc: Dict[str, Any]) -> Dict[str, Any]:
    """Insère un nouveau profil. Lève APIError 23505 si l'email existe déjà (index unique)."""
    row = split_columns({**doc, "email": normalize_email(doc.get("email", ""))}, USER_COLUMNS, PROFILE_COLUMN)
    res = client.table(USERS_TABLE).insert(row).execute()
    return insert_ack(res)


def update_last_login(client: Client, email: str, last_logged_in: str) -> Dict[str, Any]:
    """Met à jour uniquement last_logged_in pour cet email."""
    res = (
        client.table(USERS_TABLE)
        .update({"last_logged_in": last_logged_in})
        .eq("email", normalize_email(email))
        .execute()
    )
    return update_ack(res)
