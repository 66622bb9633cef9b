from jose import jwt
from pymongo.errors import AutoReconnect, ServerSelectionTimeoutError

import config
from assistant import FAILURE_MESSAGE, OFFLINE_MESSAGE, provide_assistant
from main import app


def create_request(client):
    response = client.post("/service-requests", json={
        "customer_id": "c1",
        "customer_name": "Alice",
        "description": "Leaky faucet",
        "category": "Plumbing",
    })
    assert response.status_code == 201
    return response.json()


def test_home(client):
    assert client.get("/").json() == {"message": "Fixit API is live"}


def test_product_endpoints(client):
    response = client.post("/products", json={
        "name": "Cordless Drill Driver",
        "price": 89.99,
        "category": "Power Tools",
        "description": "18V drill",
        "rating": 4.8,
    })
    assert response.status_code == 201
    product = response.json()

    assert client.get(f"/products/{product['id']}").json()["name"] == "Cordless Drill Driver"
    found = client.get("/products", params={"search": "drill"}).json()
    assert [p["id"] for p in found["products"]] == [product["id"]]

    assert client.put(f"/products/{product['id']}", json={"price": 79.0}).json()["price"] == 79.0
    assert client.delete(f"/products/{product['id']}").status_code == 200
    missing = client.get(f"/products/{product['id']}")
    assert missing.status_code == 404
    assert missing.json()["code"] == "NOT_FOUND"


def test_product_rejects_unknown_category(client):
    response = client.post("/products", json={
        "name": "Mystery", "price": 1, "category": "Gardening", "description": "",
    })
    assert response.status_code == 422


def test_profile_rating_out_of_range(client):
    profile = client.post("/service-profiles", json={"name": "Pat", "profession": "Plumber", "rate": 65}).json()

    response = client.patch(f"/service-profiles/{profile['id']}/rating", json={"rating": 9})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_profile_availability(client):
    profile = client.post("/service-profiles", json={"name": "Pat", "profession": "Plumber", "rate": 65}).json()

    client.patch(f"/service-profiles/{profile['id']}/availability", json={"available": False})

    assert client.get("/service-profiles/available").json()["count"] == 0
    assert client.get(f"/service-profiles/{profile['id']}").json()["available"] is False


def test_job_lifecycle(client):
    request = create_request(client)
    assert request["status"] == "OPEN"

    accepted = client.post(f"/service-requests/{request['id']}/accept", json={"professional_id": "p3"})
    assert accepted.json()["status"] == "IN_PROGRESS"
    assert accepted.json()["professional_id"] == "p3"

    again = client.post(f"/service-requests/{request['id']}/accept", json={"professional_id": "p4"})
    assert again.status_code == 409
    assert again.json()["code"] == "CONFLICT"

    completed = client.post(f"/service-requests/{request['id']}/complete")
    assert completed.json()["status"] == "COMPLETED"

    assert client.get("/service-requests/status/COMPLETED").json()["count"] == 1
    assert client.get("/service-requests/open").json()["count"] == 0
    assert client.get("/service-requests/professional/p3").json()["count"] == 1


def test_status_patch(client):
    request = create_request(client)

    response = client.patch(f"/service-requests/{request['id']}/status", json={"status": "COMPLETED"})

    assert response.status_code == 409


def test_accept_missing_request(client):
    response = client.post("/service-requests/nope/accept", json={"professional_id": "p3"})
    assert response.status_code == 404


def test_user_endpoints(client):
    body = {"id": "uid-alice", "email": "alice@example.com", "role": "CUSTOMER"}
    first = client.post("/users", json=body).json()
    second = client.post("/users", json=body).json()
    assert first["customer_id"] == second["customer_id"] == "10000001"

    updated = client.patch("/users/uid-alice", json={"display_name": "Alice", "phone": "555-0100"}).json()
    assert updated["profile_complete"] is True

    assert client.get("/users/customer/10000001").json()["id"] == "uid-alice"
    assert client.get("/users/email/alice@example.com").json()["id"] == "uid-alice"
    assert client.get("/users/role/customer").json()["count"] == 1
    assert client.get("/users/role/guest").status_code == 400
    assert client.get("/users/customer/123").status_code == 404
    assert client.patch("/users/nobody", json={"phone": "1"}).status_code == 404


def test_guest_role_not_accepted(client):
    response = client.post("/users", json={"id": "x", "email": "x@example.com", "role": "GUEST"})
    assert response.status_code == 422


def test_me_with_token(client, monkeypatch):
    monkeypatch.setattr(config, "AUTH_JWT_SECRET", "test-secret")
    client.post("/users", json={"id": "uid-alice", "email": "alice@example.com", "role": "CUSTOMER"})
    token = jwt.encode({"sub": "uid-alice", "email": "alice@example.com"}, "test-secret", algorithm="HS256")

    response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
    assert response.json()["customer_id"] == "10000001"

    bad = client.get("/users/me", headers={"Authorization": "Bearer not-a-token"})
    assert bad.status_code == 401


def test_me_without_identity_config(client, monkeypatch):
    monkeypatch.setattr(config, "AUTH_JWT_SECRET", None)

    response = client.get("/users/me", headers={"Authorization": "Bearer anything"})

    assert response.status_code == 503
    assert response.json()["code"] == "CONFIGURATION_ERROR"


def test_ai_persists_both_sides(client, fake_assistant):
    response = client.post("/ai", json={
        "prompt": "My faucet drips",
        "history": [{"role": "user", "text": "hi"}, {"role": "model", "text": "hello"}],
        "session_id": "s1",
    })

    assert response.json() == {"text": "Turn off the water first.", "session_id": "s1"}
    assert fake_assistant.calls[0][1] == "My faucet drips"
    history = client.get("/ai/history/s1").json()["messages"]
    assert [(m["role"], m["text"]) for m in history] == [
        ("user", "My faucet drips"),
        ("model", "Turn off the water first."),
    ]

    cleared = client.delete("/ai/history/s1").json()
    assert cleared["deleted"] == 2
    assert client.get("/ai/history/s1").json()["count"] == 0


def test_ai_masks_provider_failure(client, fake_assistant):
    fake_assistant.error = RuntimeError("quota exceeded")

    response = client.post("/ai", json={"prompt": "hello", "session_id": "s1"})

    assert response.status_code == 200
    assert response.json()["text"] == FAILURE_MESSAGE
    assert client.get("/ai/history/s1").json()["count"] == 0


def test_ai_offline_without_key(client):
    app.dependency_overrides[provide_assistant] = lambda: None

    response = client.post("/ai", json={"prompt": "hello"})

    assert response.json()["text"] == OFFLINE_MESSAGE


def test_health_reports_unreachable_database(client, store, monkeypatch):
    def unreachable():
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(store, "ping", unreachable)
    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["details"]["retryable"] is True


def test_status_patch_cannot_reassign_on_completion(client):
    request = create_request(client)
    client.post(f"/service-requests/{request['id']}/accept", json={"professional_id": "p3"})

    response = client.patch(
        f"/service-requests/{request['id']}/status",
        json={"status": "COMPLETED", "professional_id": "p9"},
    )

    assert response.status_code == 400
    assert client.get(f"/service-requests/{request['id']}").json()["professional_id"] == "p3"


def test_ai_reports_chat_storage_failure(client, store, monkeypatch):
    def unavailable(*args, **kwargs):
        raise AutoReconnect("connection reset")

    monkeypatch.setattr(store, "put", unavailable)
    response = client.post("/ai", json={"prompt": "hello", "session_id": "s1"})

    assert response.status_code == 503
    assert response.json()["code"] == "DATABASE_ERROR"
    assert response.json()["details"]["entity"] == "ChatMessage"
