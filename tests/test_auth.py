import jwt
import pytest

from storefront.application.security import create_access_token, hash_password, verify_password


def register(client, email='cyclist@example.com', password='pedal-power'):
    return client.post('/api/auth/register', json={'email': email, 'password': password, 'first_name': 'Cy'})


def test_password_hashing():
    hashed = hash_password('pedal-power')
    assert hashed != 'pedal-power'
    assert verify_password('pedal-power', hashed)
    assert not verify_password('wrong', hashed)
    assert not verify_password('pedal-power', 'not-a-hash')


def test_register_and_login(client):
    resp = register(client)
    assert resp.status_code == 201
    user = resp.json()
    assert user['email'] == 'cyclist@example.com'
    assert 'password_hash' not in user

    resp = client.post('/api/auth/login', json={'email': 'Cyclist@Example.com', 'password': 'pedal-power'})
    assert resp.status_code == 200
    body = resp.json()
    assert body['token_type'] == 'bearer'
    assert body['expires_in'] == 24 * 3600
    assert body['user']['id'] == user['id']

    claims = jwt.decode(body['token'], options={'verify_signature': False})
    assert claims['sub'] == str(user['id'])


def test_register_validation(client):
    assert register(client, email='not-an-email').status_code == 400
    assert register(client, password='123').status_code == 400
    register(client)
    assert register(client).status_code == 400


@pytest.mark.parametrize('email', ['not an@email.', 'x@y.', 'rider@', '@example.com'])
def test_malformed_email_rejected(client, email):
    assert register(client, email=email).status_code == 400
    assert client.post('/api/customers', json={'email': email, 'name': 'Rider'}).status_code == 400
    assert client.post('/api/auth/login', json={'email': email, 'password': 'pedal-power'}).status_code == 400


def test_login_failures(client):
    register(client)
    wrong = client.post('/api/auth/login', json={'email': 'cyclist@example.com', 'password': 'nope'})
    assert wrong.status_code == 401
    unknown = client.post('/api/auth/login', json={'email': 'ghost@example.com', 'password': 'pedal-power'})
    assert unknown.status_code == 401


def test_verify(client):
    user_id = register(client).json()['id']
    token = client.post('/api/auth/login', json={'email': 'cyclist@example.com', 'password': 'pedal-power'}).json()['token']

    resp = client.get('/api/auth/verify', headers={'Authorization': f'Bearer {token}'})
    assert resp.status_code == 200
    assert resp.json()['valid'] is True
    assert resp.json()['user']['id'] == user_id


def test_missing_token_is_401(client):
    assert client.get('/api/auth/verify').status_code == 401
    assert client.get('/api/auth/verify', headers={'Authorization': 'Basic abc'}).status_code == 401


def test_bad_or_expired_token_is_403(client):
    user_id = register(client).json()['id']

    garbage = client.get('/api/auth/verify', headers={'Authorization': 'Bearer not.a.jwt'})
    assert garbage.status_code == 403

    expired = create_access_token(user_id, 'cyclist@example.com', expires_hours=-1)
    assert client.get('/api/auth/verify', headers={'Authorization': f'Bearer {expired}'}).status_code == 403

    orphan = create_access_token(user_id + 100, 'ghost@example.com')
    assert client.get('/api/auth/verify', headers={'Authorization': f'Bearer {orphan}'}).status_code == 403


def test_logout(client):
    assert client.post('/api/auth/logout').json() == {'message': 'Logged out'}
