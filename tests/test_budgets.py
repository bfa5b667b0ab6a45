from datetime import datetime

def _set_budget(client, user, **overrides):
    data = {"category": "Food", "monthly_limit": 200.0}
    data.update(overrides)
    response = client.post("/api/v1/budgets/", json=data, headers=user['headers'])
    assert response.status_code == 201, response.text
    return response.json()

def _spend(client, user, amount, category="Food"):
    response = client.post(
        "/api/v1/expenses/", json={"name": "Spend", "amount": amount, "category": category}, headers=user['headers']
    )
    assert response.status_code == 201

def test_budget_defaults_to_current_month(client, user):
    now = datetime.utcnow()
    budget = _set_budget(client, user)

    assert budget['month'] == now.month
    assert budget['year'] == now.year
    assert budget['alert_threshold'] == 80.0
    assert budget['enable_alerts'] == True
    assert budget['currency'] == "USD"

def test_same_category_and_month_replaces_budget(client, user):
    first = _set_budget(client, user)
    second = _set_budget(client, user, monthly_limit=350.0)

    assert second['id'] == first['id']
    assert second['monthly_limit'] == 350.0

    listed = client.get("/api/v1/budgets/", headers=user['headers']).json()
    assert [b['monthly_limit'] for b in listed] == [350.0]

def test_list_filters_by_month_and_sorts_by_category(client, user):
    _set_budget(client, user, category="Transport", month=3, year=2024)
    _set_budget(client, user, category="Food", month=3, year=2024)
    _set_budget(client, user, category="Fun", month=4, year=2024)

    response = client.get("/api/v1/budgets/", params={"month": 3, "year": 2024}, headers=user['headers'])
    assert [b['category'] for b in response.json()] == ["Food", "Transport"]

def test_inactive_budget_not_listed(client, user):
    budget = _set_budget(client, user)
    client.patch(f"/api/v1/budgets/{budget['id']}", json={"is_active": False}, headers=user['headers'])

    assert client.get("/api/v1/budgets/", headers=user['headers']).json() == []

def test_budget_status(client, user):
    _set_budget(client, user, category="Food", monthly_limit=100.0)
    _set_budget(client, user, category="Transport", monthly_limit=50.0)
    _spend(client, user, 85.0, "Food")
    _spend(client, user, 60.0, "Transport")
    _spend(client, user, 12.0, "Books")

    report = client.get("/api/v1/budgets/status", headers=user['headers']).json()
    by_category = {s['category']: s for s in report['budget_status']}

    food = by_category['Food']
    assert food['spent'] == 85.0
    assert food['remaining'] == 15.0
    assert food['percentage_used'] == 85.0
    assert food['is_near_limit'] == True
    assert food['is_over_budget'] == False

    transport = by_category['Transport']
    assert transport['remaining'] == 0.0
    assert transport['is_over_budget'] == True

    assert report['categories_without_budget'] == [{"category": "Books", "spent": 12.0}]
    assert report['total_budget'] == 150.0
    assert report['total_spent'] == 157.0

def test_budget_of_other_user_not_found(client, user, other_user):
    budget = _set_budget(client, user)
    url = f"/api/v1/budgets/{budget['id']}"

    assert client.get(url, headers=other_user['headers']).status_code == 404
    assert client.patch(url, json={"monthly_limit": 1.0}, headers=other_user['headers']).status_code == 404
    assert client.delete(url, headers=other_user['headers']).status_code == 404
    assert client.get(url, headers=user['headers']).json()['monthly_limit'] == 200.0

    assert client.delete(url, headers=user['headers']).status_code == 200
    assert client.get(url, headers=user['headers']).status_code == 404

def test_invalid_budget_rejected(client, user):
    response = client.post(
        "/api/v1/budgets/",
        json={"category": "Food", "monthly_limit": 0, "month": 13},
        headers=user['headers']
    )
    assert response.status_code == 400
    fields = {d['field'] for d in response.json()['details']}
    assert fields == {"monthly_limit", "month"}

def test_category_budget_alerts(client, user):
    _set_budget(client, user, category="Food", monthly_limit=100.0)
    _set_budget(client, user, category="Transport", monthly_limit=50.0)
    _set_budget(client, user, category="Fun", monthly_limit=10.0, enable_alerts=False)
    _spend(client, user, 85.0, "Food")
    _spend(client, user, 60.0, "Transport")
    _spend(client, user, 20.0, "Fun")

    created = client.post("/api/v1/notifications/check", headers=user['headers']).json()
    alerts = {n['data']['category']: n['type'] for n in created}
    assert alerts == {"Food": "BUDGET_WARNING", "Transport": "BUDGET_EXCEEDED"}

    # warned once per month, but crossing the limit still alerts
    assert client.post("/api/v1/notifications/check", headers=user['headers']).json() == []
    _spend(client, user, 30.0, "Food")
    created = client.post("/api/v1/notifications/check", headers=user['headers']).json()
    assert [(n['type'], n['data']['category']) for n in created] == [("BUDGET_EXCEEDED", "Food")]

def test_budgets_exported_and_cleared(client, user):
    _set_budget(client, user)

    assert len(client.get("/api/v1/data/export", headers=user['headers']).json()['budgets']) == 1
    assert client.delete("/api/v1/data/budgets", headers=user['headers']).json() == {"count": 1}
    assert client.get("/api/v1/budgets/", headers=user['headers']).json() == []
