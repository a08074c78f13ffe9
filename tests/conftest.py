import os
import tempfile
from pathlib import Path

import pytest

# Environment must be in place before store_ratings is imported.
_TMP = Path(tempfile.mkdtemp(prefix="store_ratings_tests_"))
DB_PATH = _TMP / "test.db"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["JWT_SECRET_KEY"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["UPLOAD_DIR"] = str(_TMP / "uploads")
os.environ["CREATE_TABLES"] = "false"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402

from store_ratings.db.base import Base  # noqa: E402
import store_ratings.models  # noqa: E402,F401
from store_ratings.main import app  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_schema():
    eng = create_engine(f"sqlite:///{DB_PATH}")
    Base.metadata.drop_all(eng)
    Base.metadata.create_all(eng)
    eng.dispose()
    yield


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def register(client, username="alice", email=None, password="password1"):
    email = email or f"{username}@x.com"
    r = client.post("/api/auth/register", json={"username": username, "email": email, "password": password})
    assert r.status_code == 201, r.text
    return r.json()


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_store(client, token, **fields):
    data = {"name": "Tech World", "address": "1 Main St, New York", "category": "Electronics"}
    data.update(fields)
    r = client.post("/api/stores", data=data, headers=auth_header(token))
    assert r.status_code == 201, r.text
    return r.json()["data"]


@pytest.fixture
def alice(client):
    return register(client, "alice")


@pytest.fixture
def bob(client):
    return register(client, "bob")
