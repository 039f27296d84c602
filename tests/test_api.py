from datetime import date
from decimal import Decimal

import pytest


@pytest.fixture
def account_id(client):
    response = client.post("/accounts/", json={
        "account_name": "Everyday Checking",
        "account_type": "CHECKING",
        "initial_balance": "500.00",
    })
    assert response.status_code == 201
    return response.json()["id"]


def _post_transaction(client, account_id, amount, transaction_type, **extra):
    payload = {
        "account_id": account_id,
        "transaction_date": date.today().isoformat(),
        "amount": amount,
        "transaction_type": transaction_type,
    }
    payload.update(extra)
    return client.post("/transactions/", json=payload)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == "Server is running."


def test_transactions_move_account_balance(client, account_id):
    income = _post_transaction(client, account_id, "1200.00", "INCOME")
    assert income.status_code == 201
    expense = _post_transaction(client, account_id, "200.00", "EXPENSE")
    assert expense.status_code == 201

    account = client.get(f"/accounts/{account_id}").json()
    assert Decimal(account["balance"]) == Decimal("1500.00")

    response = client.put(f"/transactions/{expense.json()['id']}", json={"amount": "50.00"})
    assert response.status_code == 200
    assert Decimal(client.get(f"/accounts/{account_id}").json()["balance"]) == Decimal("1650.00")

    assert client.delete(f"/transactions/{income.json()['id']}").status_code == 204
    balance = client.get(f"/accounts/{account_id}/balance").json()
    assert Decimal(balance["balance"]) == Decimal("450.00")
    assert len(balance["history"]) == 1

    recomputed = client.post(f"/accounts/{account_id}/recompute-balance").json()
    assert Decimal(recomputed["balance"]) == Decimal("450.00")


def test_negative_amount_is_rejected(client, account_id):
    response = _post_transaction(client, account_id, "-10.00", "EXPENSE")
    assert response.status_code == 422


def test_missing_resources_return_404(client):
    assert client.get("/accounts/999").status_code == 404
    assert client.get("/transactions/999").status_code == 404
    assert client.get("/budgets/999").status_code == 404
    assert client.put("/goals/999/progress", json={"current_amount": "10"}).status_code == 404
    assert _post_transaction(client, 999, "10.00", "INCOME").status_code == 404


def test_budget_endpoints(client, account_id):
    category = client.post("/categories/", json={"name": "Dining"}).json()
    budget = {
        "category_id": category["id"],
        "amount": "400.00",
        "start_date": date.today().replace(day=1).isoformat(),
    }
    assert client.post("/budgets/", json=budget).status_code == 201
    assert client.post("/budgets/", json=budget).status_code == 400

    _post_transaction(client, account_id, "300.00", "EXPENSE", category_id=category["id"])

    performance = client.get("/budgets/performance").json()
    [row] = performance["categories"]
    assert row["category_name"] == "Dining"
    assert row["percentage"] == pytest.approx(75.0)
    assert row["status"] == "warning"
    assert performance["overall"]["status"] == "warning"

    assert client.get("/budgets/recommendations").json() == []


def test_budget_end_before_start_is_rejected(client, groceries):
    response = client.post("/budgets/", json={
        "category_id": groceries.id,
        "amount": "100",
        "start_date": "2024-05-01",
        "end_date": "2024-04-01",
    })
    assert response.status_code == 422


def test_dashboard_endpoints(client, account_id, groceries):
    _post_transaction(client, account_id, "2000.00", "INCOME")
    _post_transaction(client, account_id, "500.00", "EXPENSE", category_id=groceries.id)
    _post_transaction(client, account_id, "100.00", "EXPENSE")

    summary = client.get("/dashboard/summary").json()
    assert Decimal(summary["monthly_income"]["value"]) == Decimal("2000.00")
    assert Decimal(summary["monthly_expenses"]["value"]) == Decimal("600.00")
    assert summary["savings_rate"]["value"] == pytest.approx(70.0)

    cash_flow = client.get("/dashboard/cash-flow").json()
    assert Decimal(cash_flow[-1]["net"]) == Decimal("1400.00")

    breakdown = client.get("/dashboard/expenses").json()
    assert [row["category_name"] for row in breakdown["breakdown"]] == ["Groceries", "Uncategorized"]
    assert breakdown["breakdown"][1]["category_id"] == 0

    assert client.get("/dashboard/cash-flow", params={"granularity": "daily"}).status_code == 400


def test_kpi_endpoints(client):
    client.post("/assets/", json={"name": "Brokerage", "asset_type": "STOCK", "value": "250000"})
    client.post("/liabilities/", json={"name": "Card", "liability_type": "CREDIT_CARD", "amount": "50000"})

    net_worth = client.get("/kpis/net-worth").json()
    assert Decimal(net_worth["value"]) == Decimal("200000")

    freedom = client.get("/kpis/freedom-number", params={"annual_expenses": "40000"}).json()
    assert Decimal(freedom["value"]) == Decimal("1000000")
    assert freedom["progress_percentage"] == pytest.approx(20.0)

    fi_index = client.get("/kpis/fi-index").json()
    assert fi_index["value"] == pytest.approx(20.0)

    health = client.get("/kpis/health-score").json()
    assert health["value"] == pytest.approx(44.0)
    assert health["status"] == "Fair"

    rows = client.get("/kpis/").json()
    assert {row["kpi_type"] for row in rows} >= {"net_worth", "freedom_number", "fi_index", "health_score"}


def test_asset_and_liability_analytics(client):
    client.post("/assets/", json={"name": "Stocks", "asset_type": "STOCK", "value": "7500"})
    client.post("/assets/", json={"name": "Cash", "asset_type": "CASH", "value": "2500"})
    client.post("/liabilities/", json={
        "name": "Car", "liability_type": "CAR_LOAN", "amount": "1000",
        "interest_rate": "0", "payment_amount": "100", "payment_frequency": "MONTHLY",
    })

    allocation = client.get("/assets/allocation").json()
    assert Decimal(allocation["total_value"]) == Decimal("10000")
    assert allocation["allocation"][0]["percentage"] == pytest.approx(75.0)

    summary = client.get("/liabilities/summary").json()
    assert Decimal(summary["total_debt"]) == Decimal("1000")
    [projection] = summary["payoff_projections"]
    assert projection["month"] == 10
    assert Decimal(projection["remaining_debt"]) == Decimal("0")


def test_goal_completes_through_progress_endpoint(client):
    goal = client.post("/goals/", json={"name": "New laptop", "target_amount": "1500"}).json()
    assert goal["status"] == "ACTIVE"

    updated = client.put(f"/goals/{goal['id']}/progress", json={"current_amount": "1500"}).json()
    assert updated["status"] == "COMPLETED"
    assert updated["progress_percentage"] == pytest.approx(100.0)


def test_freedom_number_out_of_range_returns_400(client):
    response = client.get("/kpis/freedom-number", params={
        "annual_expenses": "40000",
        "withdrawal_rate": "0.000000000001",
    })
    assert response.status_code == 400

    response = client.get("/kpis/freedom-number", params={"withdrawal_rate": "150"})
    assert response.status_code == 422


def test_update_budget_and_category_endpoints(client):
    groceries = client.post("/categories/", json={"name": "Groceries"}).json()
    food = client.post("/categories/", json={"name": "Food"}).json()

    response = client.put(f"/categories/{groceries['id']}", json={"parent_category_id": food["id"]})
    assert response.status_code == 200
    assert response.json()["parent_category_id"] == food["id"]
    assert client.put(f"/categories/{food['id']}", json={"parent_category_id": food["id"]}).status_code == 400

    budget = client.post("/budgets/", json={
        "category_id": groceries["id"], "amount": "300", "start_date": "2024-01-01",
    }).json()
    response = client.put(f"/budgets/{budget['id']}", json={"amount": "350"})
    assert response.status_code == 200
    assert Decimal(response.json()["amount"]) == Decimal("350")

    assert client.put(f"/budgets/{budget['id']}", json={"category_id": 999}).status_code == 404
    assert client.put(f"/budgets/{budget['id']}", json={"end_date": "2023-12-01"}).status_code == 400
    assert client.put("/budgets/999", json={"amount": "10"}).status_code == 404
