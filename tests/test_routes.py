"""HTTP API tests through the Flask test client."""

from __future__ import annotations

import csv
import io
from datetime import date

import pytest


def _account(client, **overrides) -> dict:
    payload = {"name": "Checking", "type": "checking", "balance": "100.00"}
    payload.update(overrides)
    response = client.post("/settings/accounts", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _category(client, name: str, kind: str = "expense") -> dict:
    categories = client.get("/settings/categories").get_json()
    for category in categories:
        if category["name"] == name and category["type"] == kind:
            return category
    response = client.post("/settings/categories", json={"name": name, "type": kind})
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def _transaction(client, account_id: int, **overrides) -> dict:
    payload = {
        "account_id": account_id,
        "amount": "25.00",
        "type": "expense",
        "description": "Lunch",
        "date": date.today().isoformat(),
    }
    payload.update(overrides)
    response = client.post("/ledger/", json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


@pytest.mark.parametrize(
    "path",
    ["/auth/me", "/ledger/", "/settings/accounts", "/budgets/", "/analytics/", "/dashboard/", "/events/stream"],
)
def test_requires_login(client, path):
    response = client.get(path)

    assert response.status_code == 401
    assert "error" in response.get_json()


def test_register_login_logout(client):
    registered = client.post("/auth/register", json={"username": "zoe", "password": "long-enough"})
    assert registered.status_code == 201
    assert client.get("/auth/me").get_json()["username"] == "zoe"

    # New owners start with the protected default categories.
    categories = client.get("/settings/categories").get_json()
    assert categories and all(cat["is_default"] for cat in categories)

    client.post("/auth/logout")
    assert client.get("/auth/me").status_code == 401

    bad = client.post("/auth/login", json={"username": "zoe", "password": "wrong-password"})
    assert bad.status_code == 400

    good = client.post("/auth/login", json={"username": "zoe", "password": "long-enough"})
    assert good.status_code == 200
    assert client.get("/auth/me").status_code == 200


def test_register_validation_errors(client):
    response = client.post("/auth/register", json={"username": "", "password": "x"})

    assert response.status_code == 400
    errors = response.get_json()["errors"]
    assert "username" in errors
    assert "password" in errors


def test_transaction_crud_keeps_balance(auth_client):
    account = _account(auth_client)
    food = _category(auth_client, "Food & Dining")

    created = _transaction(auth_client, account["id"], category_id=food["id"])
    assert created["category"]["name"] == "Food & Dining"
    assert created["account"] == {"name": "Checking"}
    assert auth_client.get("/settings/accounts").get_json()[0]["balance"] == "75.00"

    updated = auth_client.put(
        f"/ledger/{created['id']}",
        json={
            "account_id": account["id"],
            "category_id": food["id"],
            "amount": "40",
            "type": "income",
            "date": created["date"],
        },
    )
    assert updated.status_code == 400  # expense category on an income row

    updated = auth_client.put(
        f"/ledger/{created['id']}",
        json={"account_id": account["id"], "amount": "40", "type": "income", "date": created["date"]},
    )
    assert updated.status_code == 200, updated.get_json()
    assert updated.get_json()["category_id"] is None
    assert auth_client.get("/settings/accounts").get_json()[0]["balance"] == "140.00"

    deleted = auth_client.delete(f"/ledger/{created['id']}")
    assert deleted.status_code == 200
    assert auth_client.get("/settings/accounts").get_json()[0]["balance"] == "100.00"
    assert auth_client.get(f"/ledger/{created['id']}").status_code == 404


def test_transaction_update_with_missing_links_is_not_found(auth_client):
    account = _account(auth_client)
    created = _transaction(auth_client, account["id"])

    base = {"amount": "25.00", "type": "expense", "date": created["date"]}
    missing_account = auth_client.put(f"/ledger/{created['id']}", json={**base, "account_id": 424242})
    missing_category = auth_client.put(
        f"/ledger/{created['id']}", json={**base, "account_id": account["id"], "category_id": 424242}
    )

    assert missing_account.status_code == 404
    assert missing_category.status_code == 404
    assert auth_client.get("/settings/accounts").get_json()[0]["balance"] == "75.00"
    assert auth_client.get(f"/ledger/{created['id']}").get_json()["account_id"] == account["id"]


def test_transaction_validation(auth_client):
    account = _account(auth_client)

    response = auth_client.post(
        "/ledger/",
        json={"account_id": account["id"], "amount": "-5", "type": "bogus", "date": "2024-13-01"},
    )

    assert response.status_code == 400
    errors = response.get_json()["errors"]
    assert set(errors) >= {"amount", "type", "date"}


def test_ledger_listing_filters_and_pagination(auth_client):
    account = _account(auth_client)
    groceries = _category(auth_client, "Groceries")
    _transaction(auth_client, account["id"], description="Market", category_id=groceries["id"], date="2024-01-05")
    _transaction(auth_client, account["id"], description="Bus", date="2024-01-06")
    _transaction(auth_client, account["id"], description="Pay", type="income", date="2024-01-07")

    everything = auth_client.get("/ledger/?per_page=2").get_json()
    assert everything["total"] == 3
    assert everything["pages"] == 2
    assert [row["description"] for row in everything["items"]] == ["Pay", "Bus"]

    text = auth_client.get("/ledger/?q=groc").get_json()
    assert [row["description"] for row in text["items"]] == ["Market"]

    income = auth_client.get("/ledger/?type=income").get_json()
    assert [row["description"] for row in income["items"]] == ["Pay"]

    by_category = auth_client.get(f"/ledger/?category_id={groceries['id']}").get_json()
    assert by_category["total"] == 1

    assert auth_client.get("/ledger/?type=nonsense").status_code == 400


def test_account_delete_cascades(auth_client):
    account = _account(auth_client)
    _transaction(auth_client, account["id"])

    response = auth_client.delete(f"/settings/accounts/{account['id']}")

    assert response.get_json()["transactions_removed"] == 1
    assert auth_client.get("/ledger/").get_json()["total"] == 0


def test_default_category_delete_conflict(auth_client):
    default = next(cat for cat in auth_client.get("/settings/categories").get_json() if cat["is_default"])

    response = auth_client.delete(f"/settings/categories/{default['id']}")

    assert response.status_code == 409


def test_category_delete_keeps_transactions(auth_client):
    account = _account(auth_client)
    custom = _category(auth_client, "Hobbies")
    txn = _transaction(auth_client, account["id"], category_id=custom["id"])

    assert auth_client.delete(f"/settings/categories/{custom['id']}").status_code == 200

    reloaded = auth_client.get(f"/ledger/{txn['id']}").get_json()
    assert reloaded["category_id"] is None


def test_budget_endpoints(auth_client):
    account = _account(auth_client)
    food = _category(auth_client, "Food & Dining")
    fun = _category(auth_client, "Entertainment")
    today = date.today()
    _transaction(auth_client, account["id"], amount="30", category_id=food["id"])

    created = auth_client.post(
        "/budgets/",
        json={
            "name": "This month",
            "amount": "200",
            "start_date": today.replace(day=1).isoformat(),
            "period": "monthly",
            "items": [{"category_id": food["id"], "planned_amount": "20"}],
        },
    )
    assert created.status_code == 201, created.get_json()
    body = created.get_json()
    assert body["end_date"] >= today.isoformat()
    item = body["progress"]["items"][0]
    assert item["spent"] == "30.00"
    assert item["percentage"] == 100.0
    assert item["over_budget"] is True

    added = auth_client.post(
        f"/budgets/{body['id']}/items", json={"category_id": fun["id"], "planned_amount": "50"}
    )
    assert added.status_code == 201

    overview = auth_client.get("/budgets/").get_json()
    assert [row["name"] for row in overview["active"]] == ["This month"]

    removed = auth_client.delete(f"/budgets/{body['id']}/items/{added.get_json()['id']}")
    assert removed.status_code == 200
    assert auth_client.delete(f"/budgets/{body['id']}/items/999999").status_code == 404

    assert auth_client.delete(f"/budgets/{body['id']}").status_code == 200
    assert auth_client.get(f"/budgets/{body['id']}").status_code == 404


def test_budget_validation(auth_client):
    response = auth_client.post(
        "/budgets/",
        json={
            "name": "Broken",
            "amount": "10",
            "start_date": "2024-02-10",
            "end_date": "2024-02-01",
            "period": "custom",
            "items": [{"planned_amount": "abc"}],
        },
    )

    assert response.status_code == 400
    errors = response.get_json()["errors"]
    assert "end_date" in errors
    assert "items.0.planned_amount" in errors


def test_dashboard_summary(auth_client):
    account = _account(auth_client, balance="500")
    _transaction(auth_client, account["id"], amount="100", type="income")
    _transaction(auth_client, account["id"], amount="40")

    body = auth_client.get("/dashboard/").get_json()

    assert body["total_balance"] == "560.00"
    assert body["month_income"] == "100.00"
    assert body["month_expense"] == "40.00"
    assert len(body["recent_transactions"]) == 2


def test_analytics_report_and_window_validation(auth_client):
    account = _account(auth_client)
    _transaction(auth_client, account["id"], amount="60")

    report = auth_client.get("/analytics/?months=3").get_json()
    assert len(report["monthly_series"]) == 3
    assert report["totals"]["expense"] == "60.00"
    assert report["spending_by_category"][0]["name"] == "Uncategorized"

    assert auth_client.get("/analytics/?months=5").status_code == 400


def test_calendar_endpoints(auth_client):
    account = _account(auth_client)
    _transaction(auth_client, account["id"], amount="120", date="2024-02-14")

    month = auth_client.get("/analytics/calendar?year=2024&month=2").get_json()
    cells = {cell["date"]: cell for week in month["weeks"] for cell in week}
    assert cells["2024-02-14"]["intensity"] == 3
    assert cells["2024-02-14"]["selectable"] is True
    assert month["expense"] == "120.00"

    day = auth_client.get("/analytics/calendar/2024-02-14").get_json()
    assert len(day["transactions"]) == 1

    assert auth_client.get("/analytics/calendar/not-a-date").status_code == 400
    assert auth_client.get("/analytics/calendar?year=10000&month=1").status_code == 400
    assert auth_client.get("/analytics/calendar?year=2024&month=13").status_code == 400


def test_chart_pngs(auth_client):
    account = _account(auth_client)
    _transaction(auth_client, account["id"], amount="60")

    for path in ("/analytics/charts/spending.png", "/analytics/charts/trend.png"):
        response = auth_client.get(path)
        assert response.status_code == 200
        assert response.mimetype == "image/png"
        assert response.data.startswith(b"\x89PNG")


def test_export_endpoints(auth_client):
    assert auth_client.get("/settings/export?format=csv").status_code == 400

    account = _account(auth_client)
    _transaction(auth_client, account["id"], description="Coffee")

    response = auth_client.get("/settings/export?format=csv")
    rows = list(csv.reader(io.StringIO(response.get_data(as_text=True))))
    assert response.mimetype == "text/csv"
    assert rows[0][0] == "Date"
    assert rows[1][1] == "Coffee"

    as_json = auth_client.get("/settings/export?format=json")
    assert as_json.get_json()[0]["account"] == {"name": "Checking"}


def test_purge_signs_out(auth_client):
    account = _account(auth_client)
    _transaction(auth_client, account["id"])

    response = auth_client.post("/settings/purge")

    assert response.status_code == 200
    assert response.get_json()["transactions"] == 1
    assert auth_client.get("/auth/me").status_code == 401


def test_unknown_live_view_rejected(auth_client):
    assert auth_client.get("/events/stream?view=nope").status_code == 400


def test_other_owner_records_are_not_found(client):
    client.post("/auth/register", json={"username": "first", "password": "long-enough"})
    account = _account(client)
    txn = _transaction(client, account["id"])
    client.post("/auth/logout")

    client.post("/auth/register", json={"username": "second", "password": "long-enough"})
    assert client.get(f"/ledger/{txn['id']}").status_code == 404
    assert client.delete(f"/settings/accounts/{account['id']}").status_code == 404
    denied = client.post(
        "/ledger/",
        json={"account_id": account["id"], "amount": "1", "type": "expense", "date": "2024-01-01"},
    )
    assert denied.status_code == 404
