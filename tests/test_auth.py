import pytest
from flask_jwt_extended import decode_token

from agenda.extensions import db
from agenda.models import User
from conftest import auth_headers

REGISTRATION = {
    'email': 'Jane.Doe@Example.com ',
    'password': 'secret123',
    'firstName': 'Jane',
    'lastName': 'Doe',
}


def test_register_returns_user_and_tokens(client):
    resp = client.post('/api/auth/register', json=REGISTRATION)
    assert resp.status_code == 201
    body = resp.get_json()

    assert body['success'] is True
    assert body['data']['email'] == 'jane.doe@example.com'
    assert body['data']['role'] == 'patient'
    assert body['token_type'] == 'bearer'
    assert body['access_token'] and body['refresh_token']
    assert 'password' not in body['data'] and 'passwordHash' not in body['data']
    assert decode_token(body['access_token'])['sub'] == body['data']['id']


def test_register_stores_hashed_password(client):
    client.post('/api/auth/register', json=REGISTRATION)
    user = User.query.filter_by(email='jane.doe@example.com').one()
    assert user.password_hash != 'secret123'
    assert user.check_password('secret123')


def test_register_rejects_duplicate_email_case_insensitively(client):
    assert client.post('/api/auth/register', json=REGISTRATION).status_code == 201
    dup = dict(REGISTRATION, email='JANE.DOE@example.com')
    resp = client.post('/api/auth/register', json=dup)
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'User already exists'
    assert User.query.count() == 1


@pytest.mark.parametrize('changes,field', [
    ({'email': None}, 'email'),
    ({'email': 'not-an-email'}, 'email'),
    ({'password': '123'}, 'password'),
    ({'firstName': ''}, 'firstName'),
    ({'role': 'nurse'}, 'role'),
    ({'role': 'admin'}, 'role'),
])
def test_register_validation(client, changes, field):
    payload = {key: value for key, value in dict(REGISTRATION, **changes).items() if value is not None}
    resp = client.post('/api/auth/register', json=payload)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body['code'] == 'validation_error'
    assert field in body['details']


def test_register_admin_when_allowed(app, client):
    app.config['ALLOW_ADMIN_REGISTRATION'] = True
    resp = client.post('/api/auth/register', json=dict(REGISTRATION, role='admin'))
    assert resp.status_code == 201
    assert resp.get_json()['data']['role'] == 'admin'


def test_login_success(client, register):
    register(email='login@example.com', password='hunter22')
    resp = client.post('/api/auth/login', json={'email': 'LOGIN@example.com', 'password': 'hunter22'})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['data']['email'] == 'login@example.com'
    assert body['access_token']


def test_login_failures_are_indistinguishable(client, register):
    register(email='login@example.com', password='hunter22')
    wrong_password = client.post('/api/auth/login', json={'email': 'login@example.com', 'password': 'nope-nope'})
    unknown_email = client.post('/api/auth/login', json={'email': 'ghost@example.com', 'password': 'hunter22'})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json() == {
        'success': False,
        'error': 'Invalid credentials',
        'code': 'authentication_error',
    }


def test_login_requires_fields(client):
    resp = client.post('/api/auth/login', json={'email': 'a@b.co'})
    assert resp.status_code == 400


def test_me_returns_caller_without_password(client, patient):
    user, headers = patient
    resp = client.get('/api/auth/me', headers=headers)
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['id'] == user['id']
    assert not any('password' in key.lower() for key in data)


@pytest.mark.parametrize('headers', [
    {},
    {'Authorization': 'Bearer garbage'},
    {'Authorization': 'Token abc'},
])
def test_me_rejects_missing_or_invalid_credentials(client, headers):
    resp = client.get('/api/auth/me', headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()['success'] is False


def test_expired_token_is_rejected(app, client, patient):
    from datetime import timedelta
    from flask_jwt_extended import create_access_token

    user, _ = patient
    token = create_access_token(identity=user['id'], expires_delta=timedelta(seconds=-1))
    resp = client.get('/api/auth/me', headers=auth_headers(token))
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'Token expired'


def test_token_for_deleted_user_is_rejected(client, patient):
    user, headers = patient
    db.session.delete(db.session.get(User, user['id']))
    db.session.commit()

    resp = client.get('/api/auth/me', headers=headers)
    assert resp.status_code == 401
    assert resp.get_json()['error'] == 'User not found'


def test_update_me_changes_names_only(client, patient):
    user, headers = patient
    resp = client.put('/api/auth/me', json={'firstName': 'Patricia', 'role': 'admin', 'email': 'x@y.z'}, headers=headers)
    assert resp.status_code == 200
    data = resp.get_json()['data']
    assert data['firstName'] == 'Patricia'
    assert data['role'] == 'patient'
    assert data['email'] == user['email']

    assert client.put('/api/auth/me', json={'lastName': ''}, headers=headers).status_code == 400


def test_refresh_issues_new_access_token(client):
    body = client.post('/api/auth/register', json=REGISTRATION).get_json()

    resp = client.post('/api/auth/refresh', headers=auth_headers(body['refresh_token']))
    assert resp.status_code == 200
    new_token = resp.get_json()['access_token']
    assert client.get('/api/auth/me', headers=auth_headers(new_token)).status_code == 200

    # token types are not interchangeable
    assert client.post('/api/auth/refresh', headers=auth_headers(body['access_token'])).status_code == 401
    assert client.get('/api/auth/me', headers=auth_headers(body['refresh_token'])).status_code == 401


def test_logout(client, patient):
    _, headers = patient
    resp = client.post('/api/auth/logout', headers=headers)
    assert resp.status_code == 200
    assert resp.get_json()['success'] is True
