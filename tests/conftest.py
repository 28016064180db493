"""
Pytest fixtures for the Folio app: app, client, users and logged-in sessions.
"""
import pytest

from app import create_app
from extensions import db
from models import User
from utils.security import hash_password, RATE_LIMIT_REQUESTS


@pytest.fixture
def app():
    """Create an app bound to an in-memory database."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(autouse=True)
def reset_rate_limits():
    RATE_LIMIT_REQUESTS.clear()
    yield
    RATE_LIMIT_REQUESTS.clear()


@pytest.fixture
def client(app):
    return app.test_client()


def make_user(email, password='password123', name='Ada Lovelace'):
    user = User(email=email, password_hash=hash_password(password), name=name,
                title='Engineer', bio='', location='London')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def user(app):
    """A registered user with a known password."""
    return make_user('ada@example.com')


@pytest.fixture
def other_user(app):
    return make_user('grace@example.com', name='Grace Hopper')


def _login(client, email, password='password123'):
    response = client.post('/api/auth/login', json={'email': email, 'password': password})
    assert response.status_code == 200
    return client


@pytest.fixture
def login():
    """Log a test client in as the given email."""
    return _login


@pytest.fixture
def auth_client(client, user):
    """Test client with an active session for `user`."""
    return _login(client, user.email)
