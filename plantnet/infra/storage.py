"""
Client Supabase (stockage plants / orders / users).

Le client est construit une seule fois dans le lifespan puis exposé via app.state;
les vues le récupèrent par la dépendance get_storage (pas de singleton global).
"""
from fastapi import Request
from supabase import Client, ClientOptions, create_client

from plantnet.config import SUPABASE_URL, SUPABASE_SERVICE_KEY, DOWNSTREAM_TIMEOUT

PLANTS_TABLE = "plants"
ORDERS_TABLE = "orders"
USERS_TABLE = "users"


def create_storage(url: str = SUPABASE_URL, key: str = SUPABASE_SERVICE_KEY, timeout: float = DOWNSTREAM_TIMEOUT) -> Client:
    """
    Crée le client Supabase côté serveur (clé service-role, l'autorisation est faite par l'API).
    - timeout: appliqué aux requêtes PostgREST pour ne jamais bloquer indéfiniment.
    """
    if not url or not key:
        raise RuntimeError("SUPABASE_URL et SUPABASE_SERVICE_KEY sont requis pour create_storage()")
    options = ClientOptions(postgrest_client_timeout=timeout)
    return create_client(url, key, options=options)


def get_storage(request: Request) -> Client:
    return request.app.state.storage
