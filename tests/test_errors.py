from pymongo.errors import ServerSelectionTimeoutError

from database import get_db
from main import app


class BrokenCollection:
    def find(self, *args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")


class BrokenDatabase:
    def __getitem__(self, name):
        return BrokenCollection()


def test_root(client):
    assert client.get("/").json() == {"message": "StayVista server is running"}


def test_store_failure_returns_structured_error(client):
    app.dependency_overrides[get_db] = lambda: BrokenDatabase()
    r = client.get("/rooms")
    assert r.status_code == 500
    assert r.json() == {"message": "database error"}


def test_unconfigured_store_returns_503(client):
    app.dependency_overrides.pop(get_db)
    r = client.get("/rooms")
    assert r.status_code == 503


def test_diagnostics_without_store(client):
    body = client.get("/test").json()
    assert body["backend"] == "✅ Running"
    assert body["connection_status"] == "Not Connected"


def test_app_logger_is_named_after_its_module():
    import main
    assert main.logger.name == main.__name__
