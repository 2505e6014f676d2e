def test_create_and_fetch_customer(client):
    resp = client.post('/api/customers', json={'email': 'Jane@Example.com', 'name': 'Jane', 'city': 'Leeds'})
    assert resp.status_code == 200
    body = resp.json()
    assert body['message'] == 'Customer created successfully'

    resp = client.get('/api/customers/jane@example.com')
    assert resp.status_code == 200
    assert resp.json()['id'] == body['id']
    assert resp.json()['city'] == 'Leeds'


def test_duplicate_email_rejected(client, customer):
    resp = client.post('/api/customers', json={'email': 'rider@example.com', 'name': 'Again'})
    assert resp.status_code == 400


def test_missing_fields_rejected(client):
    resp = client.post('/api/customers', json={'email': 'nobody@example.com'})
    assert resp.status_code == 400
    assert resp.json()['errors']


def test_unknown_customer(client):
    assert client.get('/api/customers/ghost@example.com').status_code == 404
