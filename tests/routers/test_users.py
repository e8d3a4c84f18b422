"""Tests for the users router."""

from unittest.mock import patch

from tests.conftest import act_as


def test_get_me(client, user_a):
    act_as(user_a.id)

    response = client.get("/api/users/me")

    assert response.status_code == 200
    assert response.json()["email"] == "alice@example.com"


def test_update_me(client, user_a):
    act_as(user_a.id)

    response = client.put("/api/users/me", json={"name": "Alice Liddell"})

    assert response.status_code == 200
    assert response.json()["name"] == "Alice Liddell"
    assert response.json()["email"] == "alice@example.com"


def test_update_me_rejects_taken_email(client, user_a, user_b):
    act_as(user_a.id)
    assert client.put("/api/users/me", json={"email": "bob@example.com"}).status_code == 409


def test_update_me_rejects_null_fields(client, user_a):
    act_as(user_a.id)

    assert client.put("/api/users/me", json={"email": None}).status_code == 422
    assert client.put("/api/users/me", json={"name": None}).status_code == 422
    assert client.get("/api/users/me").json()["name"] == "Alice"


def test_unknown_identity_not_found(client):
    act_as(404)
    assert client.get("/api/users/me").status_code == 404


def test_development_user_management(client, user_a):
    act_as(user_a.id)

    response = client.post("/api/users", json={"name": "Carol", "email": "carol@example.com"})
    assert response.status_code == 201
    carol = response.json()

    assert {u["email"] for u in client.get("/api/users").json()} == {
        "alice@example.com",
        "carol@example.com",
    }

    act_as(carol["id"])
    portfolios = client.get("/api/portfolios").json()
    assert [p["name"] for p in portfolios] == ["My Portfolio"]


def test_user_management_forbidden_in_production(client, user_a):
    act_as(user_a.id)

    with patch("folio.routers.users.settings") as settings:
        settings.is_production = True
        assert client.get("/api/users").status_code == 403
        assert (
            client.post("/api/users", json={"name": "Eve", "email": "eve@example.com"}).status_code
            == 403
        )
