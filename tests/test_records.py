from datetime import datetime

def test_expense_crud_and_filter(client, user):
    headers = user['headers']
    food = client.post("/api/v1/expenses/", json={"name": "Lunch", "amount": 12.5, "category": "Food"}, headers=headers)
    client.post("/api/v1/expenses/", json={"name": "Bus", "amount": 2.0, "category": "Transport"}, headers=headers)
    assert food.status_code == 201

    only_food = client.get("/api/v1/expenses/", params={"category": "Food"}, headers=headers)
    assert [e['name'] for e in only_food.json()] == ["Lunch"]

    updated = client.patch(f"/api/v1/expenses/{food.json()['id']}", json={"amount": 15.0}, headers=headers)
    assert updated.json()['amount'] == 15.0
    assert updated.json()['category'] == "Food"

    stats = client.get("/api/v1/expenses/stats", headers=headers).json()
    assert stats['total_monthly'] == 17.0
    assert stats['category_breakdown'] == {"Food": 15.0, "Transport": 2.0}

    assert client.delete(f"/api/v1/expenses/{food.json()['id']}", headers=headers).status_code == 200
    assert len(client.get("/api/v1/expenses/", headers=headers).json()) == 1

def test_expense_of_other_user_not_found(client, user, other_user):
    created = client.post("/api/v1/expenses/", json={"name": "Coffee", "amount": 3.0}, headers=user['headers'])
    url = f"/api/v1/expenses/{created.json()['id']}"

    assert client.get(url, headers=other_user['headers']).status_code == 404
    assert client.get(url, headers=user['headers']).status_code == 200

def test_saving_goal_progress_and_add_money(client, user):
    headers = user['headers']
    created = client.post(
        "/api/v1/savings/",
        json={"name": "Trip", "amount": 100.0, "target_amount": 400.0, "category": "Travel"},
        headers=headers
    )
    assert created.status_code == 201
    assert created.json()['progress_percentage'] == 25.0
    assert created.json()['is_completed'] == False

    saving_id = created.json()['id']
    topped_up = client.put(f"/api/v1/savings/{saving_id}/add-money", params={"amount": 100}, headers=headers)
    assert topped_up.status_code == 200
    assert topped_up.json()['amount'] == 200.0
    assert topped_up.json()['progress_percentage'] == 50.0

    rejected = client.put(f"/api/v1/savings/{saving_id}/add-money", params={"amount": 0}, headers=headers)
    assert rejected.status_code == 400

def test_saving_toggle_and_active_filter(client, user):
    headers = user['headers']
    saving_id = client.post("/api/v1/savings/", json={"name": "Rainy day"}, headers=headers).json()['id']

    toggled = client.post(f"/api/v1/savings/{saving_id}/toggle", headers=headers)
    assert toggled.json()['is_active'] == False

    active = client.get("/api/v1/savings/", params={"active_only": True}, headers=headers).json()
    assert saving_id not in [s['id'] for s in active]

    stats = client.get("/api/v1/savings/stats", headers=headers).json()
    assert stats['total_count'] == 1
    assert stats['active_count'] == 0

def test_add_money_to_other_users_saving(client, user, other_user):
    saving_id = client.post("/api/v1/savings/", json={"name": "Mine", "amount": 10}, headers=user['headers']).json()['id']

    response = client.put(
        f"/api/v1/savings/{saving_id}/add-money", params={"amount": 5}, headers=other_user['headers']
    )
    assert response.status_code == 404
    assert client.get(f"/api/v1/savings/{saving_id}", headers=user['headers']).json()['amount'] == 10.0

def test_export_and_clear(client, user):
    headers = user['headers']
    client.post("/api/v1/expenses/", json={"name": "Lunch", "amount": 9.0}, headers=headers)
    client.post(
        "/api/v1/subscriptions/",
        json={"name": "Music", "price": 5.0, "billing_date": datetime.utcnow().isoformat()},
        headers=headers
    )

    exported = client.get("/api/v1/data/export", headers=headers).json()
    assert len(exported['expenses']) == 1
    assert len(exported['subscriptions']) == 1
    assert exported['wallet']['balance'] == 0.0

    cleared = client.delete("/api/v1/data/expenses", headers=headers)
    assert cleared.json() == {"count": 1}
    assert client.get("/api/v1/expenses/", headers=headers).json() == []
    assert len(client.get("/api/v1/subscriptions/", headers=headers).json()) == 1

    assert client.delete("/api/v1/data/users", headers=headers).status_code == 404

def test_null_clears_optional_fields_only(client, user):
    headers = user['headers']
    created = client.post(
        "/api/v1/expenses/",
        json={"name": "Taxi", "amount": 20.0, "category": "Transport", "description": "airport"},
        headers=headers
    ).json()

    response = client.patch(
        f"/api/v1/expenses/{created['id']}",
        json={"category": None, "description": None, "name": None},
        headers=headers
    )
    assert response.status_code == 200
    assert response.json()['category'] is None
    assert response.json()['description'] is None
    assert response.json()['name'] == "Taxi"

def test_null_clears_saving_target(client, user):
    headers = user['headers']
    saving_id = client.post(
        "/api/v1/savings/", json={"name": "Car", "amount": 50.0, "target_amount": 500.0}, headers=headers
    ).json()['id']

    response = client.patch(f"/api/v1/savings/{saving_id}", json={"target_amount": None}, headers=headers)
    assert response.json()['target_amount'] is None
    assert response.json()['progress_percentage'] is None
