from datetime import datetime, timedelta

def _create(client, user, **overrides):
    data = {
        "name": "Netflix",
        "price": 15.99,
        "billing_date": (datetime.utcnow() + timedelta(days=20)).isoformat(),
        "categories": ["Entertainment"],
    }
    data.update(overrides)
    response = client.post("/api/v1/subscriptions/", json=data, headers=user['headers'])
    assert response.status_code == 201, response.text
    return response.json()

def test_create_and_stats(client, user):
    created = _create(client, user)
    assert created['user_id'] == user['id']
    assert created['currency'] == "USD"

    response = client.get("/api/v1/subscriptions/stats", headers=user['headers'])
    assert response.status_code == 200

    stats = response.json()
    assert stats['count'] == 1
    assert stats['total_monthly'] == 15.99
    assert round(stats['total_annual'], 2) == 191.88
    assert stats['spending_by_category'] == {"Entertainment": 15.99}
    assert [s['id'] for s in stats['upcoming_renewals']] == [created['id']]

def test_list_is_scoped_to_owner(client, user, other_user):
    mine = _create(client, user)
    _create(client, other_user, name="Hulu")

    response = client.get("/api/v1/subscriptions/", headers=user['headers'])
    assert [s['id'] for s in response.json()] == [mine['id']]

def test_update_is_partial(client, user):
    created = _create(client, user, description="family plan")

    response = client.patch(
        f"/api/v1/subscriptions/{created['id']}",
        json={"price": 17.99},
        headers=user['headers']
    )
    assert response.status_code == 200
    assert response.json()['price'] == 17.99
    assert response.json()['description'] == "family plan"
    assert response.json()['name'] == "Netflix"

def test_cross_user_access_looks_like_missing_record(client, user, other_user):
    created = _create(client, user)
    url = f"/api/v1/subscriptions/{created['id']}"

    assert client.get(url, headers=other_user['headers']).status_code == 404
    assert client.patch(url, json={"price": 0.5}, headers=other_user['headers']).status_code == 404
    assert client.delete(url, headers=other_user['headers']).status_code == 404

    untouched = client.get(url, headers=user['headers'])
    assert untouched.status_code == 200
    assert untouched.json()['price'] == 15.99

def test_delete(client, user):
    created = _create(client, user)
    url = f"/api/v1/subscriptions/{created['id']}"

    assert client.delete(url, headers=user['headers']).status_code == 200
    assert client.get(url, headers=user['headers']).status_code == 404
    assert client.delete(url, headers=user['headers']).status_code == 404

def test_invalid_payload_rejected(client, user):
    response = client.post(
        "/api/v1/subscriptions/",
        json={"name": "", "price": -1, "billing_date": "soon", "currency": "usd"},
        headers=user['headers']
    )
    assert response.status_code == 400
    fields = {d['field'] for d in response.json()['details']}
    assert fields == {"name", "price", "billing_date", "currency"}

def test_timezone_aware_billing_date_stored_as_utc(client, user):
    created = _create(client, user, billing_date="2030-01-01T10:00:00+02:00")
    assert created['billing_date'].startswith("2030-01-01T08:00:00")
