import pytest

from lockstep import create_app
from lockstep.extensions import db

ORIGIN = "http://localhost:5173"


class ApiClient:
    """Flask test client that carries the Origin and CSRF headers the API expects."""

    def __init__(self, client):
        self.client = client
        self.csrf = None

    def _remember(self, resp):
        data = resp.get_json(silent=True) or {}
        if isinstance(data, dict) and data.get("csrfToken"):
            self.csrf = data["csrfToken"]
        return resp

    def start_session(self):
        return self._remember(self.client.post("/api/auth/session", headers={"Origin": ORIGIN}))

    def get(self, path):
        return self.client.get(path, headers={"Origin": ORIGIN})

    def post(self, path, payload=None):
        headers = {"Origin": ORIGIN, "X-CSRF-Token": self.csrf or ""}
        return self._remember(self.client.post(path, json=payload, headers=headers))

    def register(self, username, password="correct-horse", player_name=None):
        return self.post("/api/auth/register", {
            "username": username,
            "password": password,
            "playerName": player_name or username.title(),
        })


@pytest.fixture
def app():
    app = create_app("testing")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def api(app):
    client = ApiClient(app.test_client())
    client.start_session()
    return client


@pytest.fixture
def make_api(app):
    def _make():
        client = ApiClient(app.test_client())
        client.start_session()
        return client
    return _make
