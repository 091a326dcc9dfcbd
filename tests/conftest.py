import itertools

import pytest
from flask_jwt_extended import create_access_token

from agenda import create_app
from agenda.extensions import db as _db
from agenda.models import User, Role


def auth_headers(token):
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def register(client):
    """Register a user over the API; returns (user_json, auth headers)."""
    counter = itertools.count(1)

    def _register(role='patient', email=None, password='secret123', first_name='Test', last_name='User'):
        email = email or f'user{next(counter)}@example.com'
        resp = client.post('/api/auth/register', json={
            'email': email,
            'password': password,
            'firstName': first_name,
            'lastName': last_name,
            'role': role,
        })
        assert resp.status_code == 201, resp.get_json()
        body = resp.get_json()
        return body['data'], auth_headers(body['access_token'])

    return _register


@pytest.fixture
def admin(app):
    """Admins cannot self-register, so create one directly."""
    user = User(email='admin@example.com', first_name='Site', last_name='Admin', role=Role.ADMIN)
    user.set_password('adminpass')
    _db.session.add(user)
    _db.session.commit()
    token = create_access_token(identity=user.id, additional_claims={'role': user.role})
    return user.to_dict(), auth_headers(token)


@pytest.fixture
def patient(register):
    return register(role='patient', first_name='Pat', last_name='Ient')


@pytest.fixture
def doctor(register):
    return register(role='doctor', first_name='Doc', last_name='Tor')
