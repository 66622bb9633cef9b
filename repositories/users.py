import logging
import random
import time
from typing import List, Optional

import config
from errors import ConflictError, NotFoundError
from models import User, UserCreate, UserRole, UserUpdate
from pymongo.errors import PyMongoError
from store import ConditionFailed, EntityStore, ItemMissing

from .base import now_iso, storage_errors

logger = logging.getLogger(__name__)

CUSTOMER_ID_COUNTER_KEY = "customer_id"


def default_display_name(email: str) -> str:
    return email.split("@")[0]


class UserRepository:
    """
    User profiles keyed by the identity provider's user id.

    Each profile gets a sequential customer number from a single counter
    record. Numbers are never reused, even after a profile is removed.
    """

    entity_name = "User"

    def __init__(self, store: EntityStore, table=None, counters_table=None, customer_id_start=None):
        self.store = store
        self.table = table or config.USERS_COLLECTION
        self.counters_table = counters_table or config.COUNTERS_COLLECTION
        self.customer_id_start = customer_id_start if customer_id_start is not None else config.CUSTOMER_ID_START

    def generate_customer_id(self) -> str:
        try:
            value = self.store.increment(
                self.counters_table, CUSTOMER_ID_COUNTER_KEY, "value", start=self.customer_id_start
            )
            return str(value)
        except PyMongoError as exc:
            # Degraded mode: uniqueness is no longer guaranteed
            logger.warning(
                "Customer id counter unavailable, falling back to timestamp-based id (degraded mode): %s", exc
            )
            millis = int(time.time() * 1000)
            return str(self.customer_id_start + (millis % 10000000) + random.randint(0, 999))

    def get_by_id(self, id: str) -> Optional[User]:
        with storage_errors(self.entity_name, "get", id):
            item = self.store.get(self.table, id)
        return User(**item) if item else None

    def get_by_id_or_raise(self, id: str) -> User:
        user = self.get_by_id(id)
        if user is None:
            raise NotFoundError(self.entity_name, id)
        return user

    def _find(self, operation: str, key: str, predicate: dict, limit=None) -> List[User]:
        with storage_errors(self.entity_name, operation, key):
            items = self.store.scan_filtered(self.table, predicate, limit=limit)
        return [User(**i) for i in items]

    def get_by_customer_id(self, customer_id: str) -> Optional[User]:
        # customer_id carries a unique index
        users = self._find("get_by_customer_id", customer_id, {"customer_id": customer_id}, limit=1)
        return users[0] if users else None

    def get_by_email(self, email: str) -> Optional[User]:
        users = self._find("get_by_email", email, {"email": email}, limit=1)
        return users[0] if users else None

    def get_by_role(self, role: UserRole) -> List[User]:
        return self._find("get_by_role", role, {"role": role})

    def get_all(self, limit: int = 50) -> List[User]:
        with storage_errors(self.entity_name, "scan"):
            items = self.store.scan_filtered(self.table, limit=limit)
        return [User(**i) for i in items]

    def create(self, data: UserCreate) -> User:
        """Create the profile for an identity, or return the one that exists."""
        existing = self.get_by_id(data.id)
        if existing:
            logger.info("User %s already exists (customer %s)", existing.id, existing.customer_id)
            return existing

        customer_id = self.generate_customer_id()
        now = now_iso()
        item = {
            "id": data.id,
            "customer_id": customer_id,
            "email": data.email,
            "role": data.role,
            "display_name": data.display_name or default_display_name(data.email),
            "phone": None,
            "address": None,
            "profile_complete": False,
            "created_at": now,
            "updated_at": now,
        }
        try:
            with storage_errors(self.entity_name, "create", data.id):
                self.store.put(self.table, item, if_absent=True)
        except ConditionFailed:
            # lost the race to a concurrent create for the same identity
            stored = self.get_by_id(data.id)
            if stored is None:
                # the customer_id index rejected the insert, only possible in degraded mode
                raise ConflictError(
                    f"Customer id {customer_id} is already taken",
                    {"id": data.id, "customer_id": customer_id},
                )
            logger.info("User %s created concurrently, returning stored profile", data.id)
            return stored

        logger.info("Created User %s (customer %s, role %s)", data.id, customer_id, data.role)
        return User(**item)

    def update(self, id: str, data: UserUpdate) -> User:
        changes = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
        if not changes:
            return self.get_by_id_or_raise(id)

        if "display_name" in changes or "phone" in changes:
            current = self.get_by_id_or_raise(id)
            # the sign-up default does not count as a display name the user chose
            display_name = changes.get("display_name")
            if display_name is None and current.display_name != default_display_name(current.email):
                display_name = current.display_name
            phone = changes.get("phone", current.phone)
            if display_name and phone:
                changes["profile_complete"] = True

        changes["updated_at"] = now_iso()
        try:
            with storage_errors(self.entity_name, "update", id):
                item = self.store.update(self.table, id, changes)
        except ItemMissing:
            raise NotFoundError(self.entity_name, id)

        logger.info("Updated User %s", id)
        return User(**item)
