from datetime import datetime, timedelta

def test_renewal_reminder_created_once(client, user):
    headers = user['headers']
    client.post(
        "/api/v1/subscriptions/",
        json={"name": "Cloud", "price": 4.0, "billing_date": (datetime.utcnow() + timedelta(days=2)).isoformat()},
        headers=headers
    )

    first = client.post("/api/v1/notifications/check", headers=headers).json()
    assert [n['type'] for n in first] == ["SUBSCRIPTION_RENEWAL"]
    assert "Cloud" in first[0]['message']

    second = client.post("/api/v1/notifications/check", headers=headers).json()
    assert second == []

def test_budget_and_low_balance_alerts(client, user):
    headers = user['headers']
    client.put("/api/v1/wallet/", json={"balance": 5.0, "monthly_budget": 100.0}, headers=headers)
    client.post("/api/v1/expenses/", json={"name": "Laptop", "amount": 150.0}, headers=headers)

    created = client.post("/api/v1/notifications/check", headers=headers).json()
    assert sorted(n['type'] for n in created) == ["BUDGET_EXCEEDED", "LOW_BALANCE"]

    counts = client.get("/api/v1/notifications/count", headers=headers).json()
    assert counts == {"total": 2, "unread": 2}

def test_goal_achieved(client, user):
    headers = user['headers']
    saving = client.post(
        "/api/v1/savings/", json={"name": "Bike", "amount": 500.0, "target_amount": 400.0}, headers=headers
    ).json()

    created = client.post("/api/v1/notifications/check", headers=headers).json()
    assert [n['type'] for n in created] == ["GOAL_ACHIEVED"]
    assert client.get(f"/api/v1/savings/{saving['id']}", headers=headers).json()['is_completed'] == True

    assert client.post("/api/v1/notifications/check", headers=headers).json() == []

def test_mark_read_and_delete(client, user, other_user):
    headers = user['headers']
    client.put("/api/v1/wallet/", json={"balance": 1.0, "monthly_budget": 100.0}, headers=headers)
    notification = client.post("/api/v1/notifications/check", headers=headers).json()[0]
    url = f"/api/v1/notifications/{notification['id']}"

    assert client.post(f"{url}/read", headers=other_user['headers']).status_code == 404
    assert client.post(f"{url}/read", headers=headers).json()['is_read'] == True
    assert client.get("/api/v1/notifications/count", headers=headers).json()['unread'] == 0

    assert client.delete(url, headers=other_user['headers']).status_code == 404
    assert client.delete(url, headers=headers).status_code == 200
    assert client.get("/api/v1/notifications/", headers=headers).json() == []

def test_read_all(client, user):
    headers = user['headers']
    client.put("/api/v1/wallet/", json={"balance": 0.0, "monthly_budget": 10.0}, headers=headers)
    client.post("/api/v1/expenses/", json={"name": "Dinner", "amount": 40.0}, headers=headers)
    client.post("/api/v1/notifications/check", headers=headers)

    assert client.post("/api/v1/notifications/read-all", headers=headers).json() == {"updated": 2}
    assert client.get("/api/v1/notifications/count", headers=headers).json() == {"total": 2, "unread": 0}
