"""Tests for the category, tag and investment type routers."""

import pytest

from tests.conftest import act_as

LABEL_PATHS = ["categories", "tags", "investment-types"]


@pytest.mark.parametrize("path", LABEL_PATHS)
def test_label_crud(client, user_a, path):
    act_as(user_a.id)

    created = client.post(f"/api/{path}", json={"name": "zeta"})
    client.post(f"/api/{path}", json={"name": "alpha"})
    assert created.status_code == 201
    assert created.json()["user_id"] == user_a.id

    assert [label["name"] for label in client.get(f"/api/{path}").json()] == ["alpha", "zeta"]

    renamed = client.put(f"/api/{path}/{created.json()['id']}", json={"name": "omega"})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "omega"

    assert client.delete(f"/api/{path}/{created.json()['id']}").status_code == 200
    assert [label["name"] for label in client.get(f"/api/{path}").json()] == ["alpha"]


@pytest.mark.parametrize("path", LABEL_PATHS)
def test_duplicate_label_conflicts(client, user_a, path):
    act_as(user_a.id)
    client.post(f"/api/{path}", json={"name": "Tech"})

    response = client.post(f"/api/{path}", json={"name": "Tech"})

    assert response.status_code == 409


@pytest.mark.parametrize("path", LABEL_PATHS)
def test_labels_are_private(client, user_a, user_b, path):
    act_as(user_a.id)
    label = client.post(f"/api/{path}", json={"name": "Private"}).json()

    act_as(user_b.id)
    assert client.get(f"/api/{path}").json() == []
    assert client.put(f"/api/{path}/{label['id']}", json={"name": "x"}).status_code == 404
    assert client.delete(f"/api/{path}/{label['id']}").status_code == 404

    # Same name is free for another user
    assert client.post(f"/api/{path}", json={"name": "Private"}).status_code == 201
