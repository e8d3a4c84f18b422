"""Tests for the snapshots router."""

from datetime import date, timedelta
from decimal import Decimal

from tests.conftest import act_as
from tests.routers.test_portfolios import create_investment, create_portfolio


def test_save_and_read_history(client, user_a):
    act_as(user_a.id)
    growth = create_portfolio(client)
    investment = create_investment(client, growth["id"])

    response = client.post("/api/snapshots")
    assert response.status_code == 200
    assert response.json() == {
        "snapshot_date": date.today().isoformat(),
        "portfolios_saved": 1,
        "investments_saved": 1,
    }

    user_history = client.get("/api/snapshots/user").json()
    assert len(user_history) == 1
    assert user_history[0]["portfolio_count"] == 1
    assert Decimal(user_history[0]["total_value"]) == Decimal("1000.00")

    portfolio_history = client.get(f"/api/snapshots/portfolio/{growth['id']}").json()
    assert [row["investment_count"] for row in portfolio_history] == [1]

    investment_history = client.get(f"/api/snapshots/investment/{investment['id']}").json()
    assert Decimal(investment_history[0]["value"]) == Decimal("1000.00")


def test_resaving_same_day_overwrites(client, user_a):
    act_as(user_a.id)
    growth = create_portfolio(client)
    investment = create_investment(client, growth["id"], stock_quantity="10")
    client.post("/api/snapshots")

    client.put(f"/api/investments/{investment['id']}", json={"current_stock_price": "190"})
    client.post("/api/snapshots")

    history = client.get(f"/api/snapshots/portfolio/{growth['id']}").json()
    assert len(history) == 1
    assert Decimal(history[0]["total_value"]) == Decimal("1900.00")


def test_history_window_and_order(client, user_a):
    act_as(user_a.id)
    create_portfolio(client)
    today = date.today()
    for days_ago in (10, 3, 1):
        snapshot_date = (today - timedelta(days=days_ago)).isoformat()
        client.post("/api/snapshots", params={"snapshot_date": snapshot_date})

    history = client.get("/api/snapshots/user", params={"days": 5}).json()

    assert [row["snapshot_date"] for row in history] == [
        (today - timedelta(days=3)).isoformat(),
        (today - timedelta(days=1)).isoformat(),
    ]


def test_other_users_history_not_found(client, user_a, user_b):
    act_as(user_a.id)
    growth = create_portfolio(client)
    client.post("/api/snapshots")

    act_as(user_b.id)
    assert client.get(f"/api/snapshots/portfolio/{growth['id']}").status_code == 404
    assert client.get("/api/snapshots/user").json() == []


def test_days_must_be_positive(client, user_a):
    act_as(user_a.id)
    assert client.get("/api/snapshots/user", params={"days": 0}).status_code == 422
