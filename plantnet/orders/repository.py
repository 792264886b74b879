"""
Accès aux données pour la feature 'orders' (table orders, ajout seul).
- document: commande client (jsonb) conservée telle quelle
- customer_email: email de la session qui a soumis la commande
"""
from typing import Any, Dict
from supabase import Client

from plantnet.infra.acks import insert_ack
from plantnet.infra.storage import ORDERS_TABLE


def insert_order(client: Client, *, document: Dict[str, Any], customer_email: str) -> Dict[str, Any]:
    res = (
        client.table(ORDERS_TABLE)
        .insert({"document": document, "customer_email": customer_email})
        .execute()
    )
    return insert_ack(res)
