import logging
import threading
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor

import pytest
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from errors import NotFoundError
from models import UserCreate, UserUpdate
from repositories import UserRepository
from store import EntityStore


class AtomicCounterCollection:
    """Only offers the atomic primitives; any separate read fails the test."""

    def __init__(self):
        self.docs = {}
        self.lock = threading.Lock()

    def find_one_and_update(self, query, update, return_document=None):
        with self.lock:
            doc = self.docs.get(query["_id"])
            if doc is None:
                return None
            for field, amount in update["$inc"].items():
                doc[field] += amount
            return dict(doc)

    def insert_one(self, doc):
        with self.lock:
            if doc["_id"] in self.docs:
                raise DuplicateKeyError("duplicate key")
            self.docs[doc["_id"]] = dict(doc)

    def find_one(self, *args, **kwargs):
        raise AssertionError("counter must not be read outside the increment")


def alice(**overrides):
    data = {"id": "auth|alice", "email": "alice@example.com", "role": "CUSTOMER"}
    data.update(overrides)
    return UserCreate(**data)


def test_customer_ids_start_above_floor(users):
    assert users.generate_customer_id() == "10000001"
    assert users.generate_customer_id() == "10000002"


def test_concurrent_customer_ids_are_unique():
    repo = UserRepository(EntityStore(defaultdict(AtomicCounterCollection)), customer_id_start=10000000)

    with ThreadPoolExecutor(max_workers=16) as pool:
        ids = list(pool.map(lambda _: repo.generate_customer_id(), range(200)))

    assert len(set(ids)) == 200
    assert sorted(int(i) for i in ids) == list(range(10000001, 10000201))


def test_degraded_mode_fallback_logs_warning(users, monkeypatch, caplog):
    def unavailable(*args, **kwargs):
        raise ServerSelectionTimeoutError("no servers")

    monkeypatch.setattr(users.store, "increment", unavailable)
    with caplog.at_level(logging.WARNING):
        customer_id = users.generate_customer_id()

    assert int(customer_id) > 10000000
    assert "degraded mode" in caplog.text


def test_create_defaults(users):
    user = users.create(alice())

    assert user.customer_id == "10000001"
    assert user.display_name == "alice"
    assert user.profile_complete is False
    assert user.role == "CUSTOMER"


def test_create_is_idempotent(users, monkeypatch):
    calls = []
    original = users.generate_customer_id

    def counting():
        calls.append(1)
        return original()

    monkeypatch.setattr(users, "generate_customer_id", counting)
    first = users.create(alice())
    second = users.create(alice(email="other@example.com", role="PROFESSIONAL"))

    assert first.customer_id == second.customer_id
    assert second.email == "alice@example.com"
    assert second.role == "CUSTOMER"
    assert len(calls) == 1


def test_create_race_returns_stored_profile(users, store, monkeypatch):
    # another request stores the profile between the existence check and the insert
    def allocate_while_racing():
        store.put(users.table, {
            "id": "auth|alice",
            "customer_id": "10000500",
            "email": "alice@example.com",
            "role": "CUSTOMER",
            "display_name": "Alice",
            "profile_complete": False,
            "created_at": "2026-01-01T00:00:00+00:00",
            "updated_at": "2026-01-01T00:00:00+00:00",
        })
        return "10000501"

    monkeypatch.setattr(users, "generate_customer_id", allocate_while_racing)
    user = users.create(alice())

    assert user.customer_id == "10000500"
    assert user.display_name == "Alice"


def test_profile_complete_is_sticky(users):
    user = users.create(alice())

    user = users.update(user.id, UserUpdate(address="1 Main St"))
    assert user.profile_complete is False

    user = users.update(user.id, UserUpdate(display_name="Alice", phone="555-0100"))
    assert user.profile_complete is True

    user = users.update(user.id, UserUpdate(role="PROFESSIONAL"))
    assert user.profile_complete is True
    assert user.role == "PROFESSIONAL"
    assert user.customer_id == "10000001"


def test_sign_up_default_name_does_not_complete_profile(users):
    user = users.create(alice())

    user = users.update(user.id, UserUpdate(phone="555-0100"))

    assert user.display_name == "alice"
    assert user.profile_complete is False


def test_profile_complete_uses_prior_updates(users):
    user = users.create(alice())

    user = users.update(user.id, UserUpdate(display_name="Alice A."))
    assert user.profile_complete is False

    user = users.update(user.id, UserUpdate(phone="555-0100"))
    assert user.profile_complete is True
    assert user.display_name == "Alice A."


def test_update_missing_user(users):
    with pytest.raises(NotFoundError):
        users.update("nobody", UserUpdate(address="x"))
    with pytest.raises(NotFoundError):
        users.update("nobody", UserUpdate())


def test_lookups(users):
    a = users.create(alice())
    b = users.create(UserCreate(id="auth|bob", email="bob@example.com", role="PROFESSIONAL"))

    assert users.get_by_customer_id(b.customer_id).id == "auth|bob"
    assert users.get_by_email("alice@example.com").id == a.id
    assert [u.id for u in users.get_by_role("PROFESSIONAL")] == ["auth|bob"]
    assert users.get_by_customer_id("99999999") is None
    assert users.get_by_email("nobody@example.com") is None
    assert len(users.get_all()) == 2
