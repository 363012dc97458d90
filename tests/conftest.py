from datetime import datetime

import mongomock
import pytest
from fastapi.testclient import TestClient

from main import app, get_habit_store, get_now, get_user_store
from store import HabitStore, UserStore

# Fixed reference "now" for everything that depends on today
NOW = datetime(2024, 3, 10, 12, 30)


@pytest.fixture
def db():
    return mongomock.MongoClient()["habits_test"]


@pytest.fixture
def habit_store(db):
    store = HabitStore(db)
    store.ensure_indexes()
    return store


@pytest.fixture
def user_store(db):
    store = UserStore(db)
    store.ensure_indexes()
    return store


@pytest.fixture
def client(habit_store, user_store):
    app.dependency_overrides[get_habit_store] = lambda: habit_store
    app.dependency_overrides[get_user_store] = lambda: user_store
    app.dependency_overrides[get_now] = lambda: NOW
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def signup(client, email="ada@example.com", password="secret123", name="Ada"):
    resp = client.post("/api/auth/signup", json={"email": email, "password": password, "name": name})
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return signup(client)
