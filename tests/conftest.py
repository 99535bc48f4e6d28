import os
import sys
import pytest

# Ensure the project root (containing the `tictac` package and config.py) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from tictac import create_app, db, socketio
from helpers import PARTY_A, TREASURY


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:3000']
    WIN_FEE_PERCENT = 3
    DRAW_FEE_PERCENT = 1
    FEE_DUST_THRESHOLD = 10_000_000
    TREASURY_WALLET = TREASURY
    GAME_WALLET = None


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import tictac.models  # noqa: F401
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
def make_match(client):
    """Create a match over HTTP and return its JSON snapshot."""
    def _make(party_a=PARTY_A, stake=0, board_size=9, party_b=None):
        res = client.post('/api/matches/create', json={'party_a': party_a, 'stake': stake, 'board_size': board_size})
        assert res.status_code == 201, res.get_json()
        match = res.get_json()['match']
        if party_b:
            res = client.post(f"/api/matches/{match['id']}/join", json={'party_b': party_b})
            assert res.status_code == 200, res.get_json()
            match = res.get_json()['match']
        return match
    return _make
