from typing import Any, Dict
from urllib.parse import urlparse

from supabase import Client

from plantnet.config import SUPABASE_URL
from plantnet.errors import AppError
from plantnet.infra import downstream
from plantnet.infra.storage import PLANTS_TABLE, ORDERS_TABLE, USERS_TABLE


def _count_sample(client: Client, name: str) -> int:
    res = client.table(name).select("*").limit(1).execute()
    return len(res.data or [])


async def storage_info(client: Client) -> Dict[str, Any]:
    parsed = urlparse(SUPABASE_URL) if SUPABASE_URL else None
    info: Dict[str, Any] = {
        "hostname": parsed.hostname if parsed else None,
        "connect_ok": True,
        "tables": {},
    }
    for t in (PLANTS_TABLE, ORDERS_TABLE, USERS_TABLE):
        try:
            rows = await downstream.call(f"health.{t}", _count_sample, client, t)
            info["tables"][t] = {"ok": True, "rows": rows}
        except AppError as e:
            info["connect_ok"] = False
            info["tables"][t] = {"ok": False, "error": e.code}
    return info
