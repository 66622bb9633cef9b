import mongomock
import pytest
from fastapi.testclient import TestClient

from assistant import provide_assistant
from database import ensure_indexes, get_store
from main import app
from repositories import (
    ChatRepository,
    ProductRepository,
    ServiceProfileRepository,
    ServiceRequestRepository,
    UserRepository,
)
from store import EntityStore


@pytest.fixture
def mongo_db():
    db = mongomock.MongoClient()["fixit_test"]
    ensure_indexes(db)
    return db


@pytest.fixture
def store(mongo_db):
    return EntityStore(mongo_db)


@pytest.fixture
def products(store):
    return ProductRepository(store)


@pytest.fixture
def profiles(store):
    return ServiceProfileRepository(store)


@pytest.fixture
def requests_repo(store):
    return ServiceRequestRepository(store)


@pytest.fixture
def users(store):
    return UserRepository(store)


@pytest.fixture
def chat(store):
    return ChatRepository(store)


class FakeAssistant:
    def __init__(self, text="Turn off the water first.", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def reply(self, history, prompt):
        self.calls.append((history, prompt))
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def fake_assistant():
    return FakeAssistant()


@pytest.fixture
def client(store, fake_assistant):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[provide_assistant] = lambda: fake_assistant
    yield TestClient(app)
    app.dependency_overrides.clear()
