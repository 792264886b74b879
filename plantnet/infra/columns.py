"""
Répartition colonnes fixes / champs libres pour les tables à schéma figé.

Les champs que le client peut ajouter (profil, fiche plante) sont rangés dans une
colonne jsonb dédiée à l'écriture, puis remis à plat à la lecture.
"""
from typing import Any, Dict, Iterable, Optional


def split_columns(doc: Dict[str, Any], columns: Iterable[str], extra_key: str) -> Dict[str, Any]:
    cols = set(columns)
    row = {k: v for k, v in doc.items() if k in cols}
    extra = {k: v for k, v in doc.items() if k not in cols and k not in ("id", extra_key)}
    if extra:
        row[extra_key] = extra
    return row


def merge_columns(row: Optional[Dict[str, Any]], extra_key: str) -> Optional[Dict[str, Any]]:
    if row is None:
        return None
    flat = dict(row)
    extra = flat.pop(extra_key, None) or {}
    # Les colonnes fixes priment sur les champs libres homonymes
    return {**extra, **flat}
