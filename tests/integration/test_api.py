from uuid import uuid4

import pytest

from plantnet.config import TOKEN_COOKIE_NAME


def test_root_greeting(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.text == "Hello from plantNet Server.."


def test_health(client):
    assert client.get("/health").json() == {"ok": True}


def test_jwt_sets_cookie_and_logout_clears_it(client):
    r = client.post("/jwt", json={"email": "a@x.com", "name": "Ann"})
    assert r.status_code == 200
    assert r.json() == {"success": True}
    set_cookie = r.headers.get("set-cookie", "").lower()
    assert "token=" in set_cookie and "httponly" in set_cookie

    # le cookie émis donne accès aux routes protégées
    assert client.post("/user", json={"email": "a@x.com"}).status_code == 200

    r = client.get("/logout")
    assert r.json() == {"success": True}
    assert "max-age=0" in r.headers.get("set-cookie", "").lower()


def test_jwt_requires_email(client):
    r = client.post("/jwt", json={"name": "no email"})
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"


def test_error_envelope_carries_request_id(client):
    r = client.post("/order", json={}, headers={"X-Request-ID": "req-42"})
    assert r.status_code == 401
    assert r.json() == {"message": "unauthorized access", "error": "unauthenticated", "request_id": "req-42"}
    assert r.headers["X-Request-ID"] == "req-42"


def test_invalid_cookie_is_401(client):
    client.cookies.set(TOKEN_COOKIE_NAME, "forged.token.value")
    r = client.post("/create-payment-intent", json={"plantId": str(uuid4()), "quantity": 1})
    assert r.status_code == 401


# --- Utilisateurs ---

def test_user_upsert_twice_keeps_single_customer(client, login, memory_db):
    login("a@x.com")
    r1 = client.post("/user", json={"email": "a@x.com"})
    r2 = client.post("/user", json={"email": "a@x.com"})

    assert r1.status_code == 200 and r1.json()["insertedId"]
    assert r2.status_code == 200 and r2.json()["matchedCount"] == 1
    docs = [u for u in memory_db.tables["users"] if u["email"] == "a@x.com"]
    assert len(docs) == 1
    assert docs[0]["role"] == "customer"


def test_user_cannot_register_other_email(client, login, memory_db):
    login("a@x.com")
    r = client.post("/user", json={"email": "b@x.com"})
    assert r.status_code == 403
    assert memory_db.tables["users"] == []


def test_user_requires_session(client):
    assert client.post("/user", json={"email": "a@x.com"}).status_code == 401


# --- Catalogue ---

def test_list_and_get_plant(client, memory_db):
    plant_id = memory_db.add_plant(name="Monstera", price=10.0)

    plants = client.get("/plants").json()
    assert [p["id"] for p in plants] == [plant_id]

    r = client.get(f"/plant/{plant_id}")
    assert r.status_code == 200
    assert r.json()["name"] == "Monstera"


def test_get_unknown_plant_is_null(client, memory_db):
    r = client.get(f"/plant/{uuid4()}")
    assert r.status_code == 200
    assert r.json() is None


def test_get_plant_malformed_id(client, memory_db):
    r = client.get("/plant/not-an-id")
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"


def test_add_plant_requires_seller(client, login, memory_db):
    login("c@x.com")
    memory_db.insert("users", {"email": "c@x.com", "role": "customer"})
    r = client.post("/add-plant", json={"name": "Fern", "price": 4.5})
    assert r.status_code == 403
    assert memory_db.tables["plants"] == []


def test_add_plant_as_seller(client, login, memory_db):
    login("s@x.com")
    memory_db.insert("users", {"email": "s@x.com", "role": "seller"})
    r = client.post("/add-plant", json={"name": "Fern", "price": 4.5, "category": "Indoor", "seller": {"email": "s@x.com"}})
    assert r.status_code == 200
    assert r.json()["acknowledged"] is True
    stored = memory_db.tables["plants"][0]
    assert stored["name"] == "Fern" and stored["seller"] == {"email": "s@x.com"}


def test_add_plant_rejects_invalid_price(client, login, memory_db):
    login("s@x.com")
    memory_db.insert("users", {"email": "s@x.com", "role": "seller"})
    r = client.post("/add-plant", json={"name": "Fern", "price": 0})
    assert r.status_code == 400


# --- Paiement ---

def test_payment_intent_uses_server_price(client, login, memory_db, gateway):
    login()
    plant_id = memory_db.add_plant(name="Monstera", price=10.0)

    r = client.post("/create-payment-intent", json={"plantId": plant_id, "quantity": 3, "price": 0.01})

    assert r.status_code == 200
    assert r.json() == {"clientSecret": "pi_1_secret"}
    assert gateway.intents["pi_1"]["amount"] == 3000


def test_payment_intent_unknown_plant_404(client, login, memory_db, gateway):
    login()
    r = client.post("/create-payment-intent", json={"plantId": str(uuid4()), "quantity": 1})
    assert r.status_code == 404
    assert r.json()["message"] == "Plant Not Found"
    assert gateway.created == []


@pytest.mark.parametrize("body", [
    {"plantId": "x", "quantity": 1},
    {"quantity": 1},
    {"plantId": str(uuid4()), "quantity": 0},
    {"plantId": str(uuid4()), "quantity": -2},
])
def test_payment_intent_validation(client, login, memory_db, gateway, body):
    login()
    r = client.post("/create-payment-intent", json=body)
    assert r.status_code == 400
    assert gateway.created == []


def test_payment_intent_requires_session(client, memory_db, gateway):
    r = client.post("/create-payment-intent", json={"plantId": str(uuid4()), "quantity": 1})
    assert r.status_code == 401
    assert gateway.created == []


# --- Commande ---

def test_checkout_then_order(client, login, memory_db, gateway):
    login("buyer@example.com")
    plant_id = memory_db.add_plant(name="Monstera", price=10.0)
    client.post("/create-payment-intent", json={"plantId": plant_id, "quantity": 2})
    gateway.succeed("pi_1")

    order = {
        "plantId": plant_id,
        "quantity": 2,
        "price": 20.0,
        "transactionId": "pi_1",
        "customer": {"email": "buyer@example.com", "name": "Buyer"},
        "status": "Pending",
    }
    r = client.post("/order", json=order)

    assert r.status_code == 200
    assert r.json()["insertedId"]
    stored = memory_db.tables["orders"][0]
    assert stored["document"] == order
    assert stored["customer_email"] == "buyer@example.com"


def test_order_without_payment_is_rejected(client, login, memory_db, gateway):
    login("buyer@example.com")
    r = client.post("/order", json={"plantId": str(uuid4()), "quantity": 1})
    assert r.status_code == 400
    assert memory_db.tables["orders"] == []


def test_order_trusted_mode(client, login, memory_db, monkeypatch):
    monkeypatch.setattr("plantnet.config.ORDER_VERIFY_PAYMENT", False)
    login("buyer@example.com")
    r = client.post("/order", json={"plantId": str(uuid4()), "quantity": 1, "note": "gift"})
    assert r.status_code == 200
    assert memory_db.tables["orders"][0]["document"]["note"] == "gift"


# --- Erreurs des services externes ---

def test_storage_timeout_maps_to_503(client, monkeypatch):
    def _slow(client):
        raise TimeoutError("read timeout")

    monkeypatch.setattr("plantnet.catalog.repository.list_plants", _slow)
    r = client.get("/plants")
    assert r.status_code == 503
    assert r.json()["error"] == "downstream_unavailable"


def test_storage_failure_maps_to_502(client, monkeypatch):
    def _broken(client):
        raise RuntimeError("boom")

    monkeypatch.setattr("plantnet.catalog.repository.list_plants", _broken)
    r = client.get("/plants")
    assert r.status_code == 502
    assert r.json()["error"] == "downstream_failure"


# --- Santé ---

def test_health_storage_reports_tables(client, app):
    builder = app.state.storage.table.return_value
    builder.select.return_value.limit.return_value.execute.return_value.data = [{"id": "x"}]

    r = client.get("/health/storage")
    body = r.json()
    assert r.status_code == 200
    assert body["connect_ok"] is True
    assert set(body["tables"]) == {"plants", "orders", "users"}
    assert body["rate_limit"]["enabled"] is False


def test_health_storage_down_is_503(client, app):
    app.state.storage.table.side_effect = TimeoutError("no route to host")

    r = client.get("/health/storage")
    assert r.status_code == 503
    assert r.json()["tables"]["plants"] == {"ok": False, "error": "downstream_unavailable"}


# --- Bornes et normalisation ---

@pytest.mark.parametrize("quantity", [10_001, 10 ** 30])
def test_payment_intent_rejects_oversized_quantity(client, login, memory_db, gateway, quantity):
    login()
    plant_id = memory_db.add_plant(name="Monstera", price=10.0)
    r = client.post("/create-payment-intent", json={"plantId": plant_id, "quantity": quantity})
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"
    assert gateway.created == []


def test_payment_intent_total_above_maximum_is_400(client, login, memory_db, gateway):
    login()
    plant_id = memory_db.add_plant(name="Rare Orchid", price=500_000)
    r = client.post("/create-payment-intent", json={"plantId": plant_id, "quantity": 3})
    assert r.status_code == 400
    assert r.json()["error"] == "validation_error"
    assert gateway.created == []


@pytest.mark.parametrize("reserved", [{"aud": "web"}, {"nbf": 1700000000}, {"exp": 1}])
def test_jwt_rejects_registered_claims(client, reserved):
    r = client.post("/jwt", json={"email": "a@x.com", **reserved})
    assert r.status_code == 400
    assert "set-cookie" not in r.headers


def test_jwt_extra_claims_keep_session_usable(client):
    assert client.post("/jwt", json={"email": "a@x.com", "photoURL": "https://img/a.png"}).status_code == 200
    assert client.post("/user", json={"email": "a@x.com"}).status_code == 200


def test_user_email_case_does_not_duplicate_profile(client, login, memory_db):
    login("a@x.com")
    assert client.post("/user", json={"email": "A@x.com"}).status_code == 200
    assert client.post("/user", json={"email": "a@X.com"}).status_code == 200

    users = memory_db.tables["users"]
    assert len(users) == 1
    assert users[0]["email"] == "a@x.com"
