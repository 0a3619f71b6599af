import os
import sys
import pytest

# Ensure the backend root (containing the `partyquiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from partyquiz import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    CORS_ORIGINS = '*'
    MAX_QUESTIONS = 50
    PARTY_CODE_LENGTH = 4
    PARTY_CODE_MAX_ATTEMPTS = 10
    ENFORCE_CURRENT_QUESTION = False
    STATUS_DOWNGRADE_POLICY = 'reject'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import partyquiz.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def make_party(client):
    """Create a party over HTTP and return its JSON payload."""
    def _make(total_questions=3):
        res = client.post('/api/party/create', json={'totalQuestions': total_questions})
        assert res.status_code == 201
        return res.get_json()
    return _make


@pytest.fixture()
def join(client):
    def _join(code, name):
        res = client.post('/api/party/join', json={'code': code, 'name': name})
        assert res.status_code == 201, res.get_json()
        return res.get_json()
    return _join
