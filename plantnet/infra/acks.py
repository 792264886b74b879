"""
Accusés de réception des écritures, au format attendu par le front
(insertedId / matchedCount / modifiedCount).
"""
from typing import Any, Dict, List


def _rows(res: Any) -> List[Dict[str, Any]]:
    rows = getattr(res, "data", None) or []
    return rows if isinstance(rows, list) else [rows]


def insert_ack(res: Any) -> Dict[str, Any]:
    rows = _rows(res)
    inserted_id = rows[0].get("id") if rows else None
    return {"acknowledged": True, "insertedId": inserted_id}


def update_ack(res: Any) -> Dict[str, Any]:
    count = len(_rows(res))
    return {"acknowledged": True, "matchedCount": count, "modifiedCount": count}
