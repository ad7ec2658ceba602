import os

# Settings are read at import time, so they must be in place before the app modules load
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["MCP_ENABLED"] = "false"

import mongomock
import pytest
from fastapi.testclient import TestClient

from main import create_app
from mongo import ensure_indexes, get_db


@pytest.fixture
def db():
    database = mongomock.MongoClient()["ClinicTest"]
    ensure_indexes(database)
    return database


@pytest.fixture
def app(db):
    application = create_app(mcp_enabled=False)
    application.dependency_overrides[get_db] = lambda: db
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


def auth_header(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a doctor and return (token, doctor_id)"""

    def _register(name="Dr One", email="a@x.com", password="secret1"):
        response = client.post(
            "/api/auth/register",
            json={"name": name, "email": email, "password": password},
        )
        assert response.status_code == 201, response.text
        body = response.json()
        return body["token"], body["doctor"]["id"]

    return _register


@pytest.fixture
def two_doctors(register):
    token1, id1 = register("Dr One", "a@x.com", "secret1")
    token2, id2 = register("Dr Two", "b@x.com", "secret2")
    return {"d1": (token1, id1), "d2": (token2, id2)}


@pytest.fixture
def add_patient(client):
    def _add_patient(token, name="John Doe", age=35, disease="Hypertension"):
        response = client.post(
            "/api/patients",
            json={"name": name, "age": age, "disease": disease},
            headers=auth_header(token),
        )
        assert response.status_code == 201, response.text
        return response.json()["patient"]

    return _add_patient
