import os
import threading

# Configuration de test posée avant l'import de plantnet.config
os.environ.setdefault("ACCESS_TOKEN_SECRET", "test-secret-for-plantnet-session-tokens-0123456789")
os.environ.setdefault("DISABLE_FASTAPI_LIMITER_INIT_FOR_TESTS", "1")
os.environ.setdefault("ORDER_VERIFY_PAYMENT", "true")

from typing import Any, Dict, Generator, List, Optional
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError
from tenacity import wait_none

from plantnet.app_setup.factory import create_app
from plantnet.auth.credentials import issue_token
from plantnet.config import TOKEN_COOKIE_NAME


# Marquage automatique selon le dossier
def pytest_collection_modifyitems(config, items):
    for item in items:
        nodeid = item.nodeid.replace("\\", "/")
        if "/tests/unit/" in nodeid:
            item.add_marker(pytest.mark.unit)
        elif "/tests/integration/" in nodeid:
            item.add_marker(pytest.mark.integration)


class MemoryDB:
    """Tables en mémoire avec index unique optionnel (comme users.email en base)."""

    def __init__(self):
        self.tables: Dict[str, List[Dict[str, Any]]] = {"plants": [], "orders": [], "users": []}
        self._lock = threading.Lock()

    def insert(self, table: str, doc: Dict[str, Any], unique: Optional[str] = None) -> Dict[str, Any]:
        with self._lock:
            rows = self.tables[table]
            if unique and any(r.get(unique) == doc.get(unique) for r in rows):
                raise APIError({"code": "23505", "message": "duplicate key value violates unique constraint"})
            row = {"id": str(uuid4()), **doc}
            rows.append(row)
        return {"acknowledged": True, "insertedId": row["id"]}

    def find(self, table: str, **where) -> Optional[Dict[str, Any]]:
        for r in self.tables[table]:
            if all(r.get(k) == v for k, v in where.items()):
                return r
        return None

    def add_plant(self, **fields) -> str:
        return self.insert("plants", fields)["insertedId"]


class FakeGateway:
    """Passerelle Stripe factice: enregistre les appels et conserve les intents créés."""

    def __init__(self):
        self.created: List[Dict[str, Any]] = []
        self.intents: Dict[str, Dict[str, Any]] = {}

    def create_intent(self, *, amount, currency, metadata, idempotency_key):
        intent_id = f"pi_{len(self.created) + 1}"
        intent = {
            "id": intent_id,
            "client_secret": f"{intent_id}_secret",
            "amount": amount,
            "currency": currency,
            "status": "requires_payment_method",
            "metadata": dict(metadata),
        }
        self.created.append({"amount": amount, "currency": currency, "metadata": dict(metadata), "idempotency_key": idempotency_key})
        self.intents[intent_id] = intent
        return dict(intent)

    def retrieve_intent(self, intent_id):
        intent = self.intents.get(intent_id)
        return dict(intent) if intent else None

    def succeed(self, intent_id):
        self.intents[intent_id]["status"] = "succeeded"


@pytest.fixture(autouse=True)
def _no_retry_wait(monkeypatch):
    monkeypatch.setattr("plantnet.infra.downstream.RETRY_WAIT", wait_none())


@pytest.fixture
def memory_db(monkeypatch) -> MemoryDB:
    """Remplace les repositories Supabase par des tables en mémoire."""
    db = MemoryDB()

    monkeypatch.setattr("plantnet.catalog.repository.list_plants", lambda client: list(db.tables["plants"]))
    monkeypatch.setattr("plantnet.catalog.repository.find_plant", lambda client, plant_id: db.find("plants", id=plant_id))
    monkeypatch.setattr("plantnet.catalog.repository.insert_plant", lambda client, doc: db.insert("plants", doc))

    monkeypatch.setattr("plantnet.users.repository.find_user_by_email", lambda client, email: db.find("users", email=email))
    monkeypatch.setattr("plantnet.users.repository.insert_user", lambda client, doc: db.insert("users", doc, unique="email"))

    def _update_last_login(client, email, last_logged_in):
        matched = [r for r in db.tables["users"] if r.get("email") == email]
        for r in matched:
            r["last_logged_in"] = last_logged_in
        return {"acknowledged": True, "matchedCount": len(matched), "modifiedCount": len(matched)}

    monkeypatch.setattr("plantnet.users.repository.update_last_login", _update_last_login)

    monkeypatch.setattr(
        "plantnet.orders.repository.insert_order",
        lambda client, *, document, customer_email: db.insert("orders", {"document": document, "customer_email": customer_email}),
    )
    return db


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def app(memory_db, gateway):
    return create_app(storage=MagicMock(name="storage"), gateway=gateway)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def login(client):
    """Pose un cookie de session valide pour l'email donné."""
    def _login(email: str = "buyer@example.com", **claims) -> str:
        token = issue_token({"email": email, **claims})
        client.cookies.set(TOKEN_COOKIE_NAME, token)
        return token
    return _login
