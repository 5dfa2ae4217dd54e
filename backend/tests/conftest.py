import os
import sys
import pytest
from flask import g

# Ensure the backend root (containing the `gamehub` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from gamehub import create_app, db, socketio
from gamehub.config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    LEADERBOARD_LIMIT = 100


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)

    # Requests reuse the fixture's app context, so Flask-Login's cached
    # user in `g` would otherwise follow every later test client.
    @application.teardown_request
    def forget_login_user(exc):
        g.pop('_login_user', None)

    with application.app_context():
        # Ensure models are imported so tables are created
        import gamehub.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def register(client, username, password='password', email=None):
    body = {'username': username, 'password': password}
    if email:
        body['email'] = email
    return client.post('/api/register', json=body)


@pytest.fixture()
def auth_client(flask_app, client):
    """A test client already registered (and logged in) as 'alice'."""
    res = register(client, 'alice', email='alice@example.com')
    assert res.status_code == 201
    return client


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
