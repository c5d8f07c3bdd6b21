import os

os.environ["ACCESS_TOKEN_SECRET"] = "test-secret"
os.environ.pop("DATABASE_URL", None)
os.environ.pop("STRIPE_SECRET", None)

import mongomock
import pytest
from fastapi.testclient import TestClient

import auth
from database import get_db
from main import app
from payments import get_payment_gateway


class FakeGateway:
    def __init__(self):
        self.amounts = []

    def create_payment_intent(self, amount):
        self.amounts.append(amount)
        return f"pi_{amount}_secret"


@pytest.fixture
def db():
    return mongomock.MongoClient().stayvista


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(db, gateway):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client, db):
    """Store a user with the given role and put its token in the client cookie."""
    def _login(email, role="guest"):
        if role is not None:
            db.users.insert_one({"email": email, "role": role, "timestamp": 1700000000000})
        client.cookies.set(auth.COOKIE_NAME, auth.issue_token({"email": email}))
        return client
    return _login
