import logging
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo.errors import AutoReconnect, ExecutionTimeout, PyMongoError, WTimeoutError

from errors import DatabaseError, NotFoundError, ValidationError
from store import EntityStore, ItemMissing

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


def is_retryable(exc: PyMongoError) -> bool:
    # NetworkTimeout and ServerSelectionTimeoutError are AutoReconnect subclasses
    return isinstance(exc, (AutoReconnect, ExecutionTimeout, WTimeoutError)) or getattr(exc, "timeout", False)


@contextmanager
def storage_errors(entity: str, operation: str, key: Optional[str] = None):
    """Re-raise storage faults as DatabaseError with entity context."""
    try:
        yield
    except PyMongoError as exc:
        logger.error(
            "Storage call failed: entity=%s operation=%s key=%s error=%s",
            entity, operation, key, exc,
            exc_info=True,
        )
        raise DatabaseError(
            f"Failed to {operation} {entity}",
            entity=entity,
            operation=operation,
            key=key,
            retryable=is_retryable(exc),
        ) from exc


def check_rating(rating) -> None:
    if rating is not None and not 0 <= rating <= 5:
        raise ValidationError("Rating must be between 0 and 5", {"rating": rating})


def check_positive(field: str, value) -> None:
    if value is not None and value <= 0:
        raise ValidationError(f"{field} must be greater than 0", {field: value})


class BaseRepository:
    """CRUD over one collection, returning ``model`` instances."""

    table: str = ""
    entity_name: str = ""
    model = None

    def __init__(self, store: EntityStore):
        self.store = store

    def _to_model(self, item: Dict[str, Any]):
        return self.model(**item)

    def get_by_id(self, id: str):
        with storage_errors(self.entity_name, "get", id):
            item = self.store.get(self.table, id)
        return self._to_model(item) if item else None

    def get_by_id_or_raise(self, id: str):
        entity = self.get_by_id(id)
        if entity is None:
            raise NotFoundError(self.entity_name, id)
        return entity

    def get_all(self) -> List:
        return self.scan()

    def scan(self, predicate: Optional[Dict[str, Any]] = None) -> List:
        with storage_errors(self.entity_name, "scan"):
            items = self.store.scan_filtered(self.table, predicate)
        return [self._to_model(i) for i in items]

    def create(self, item: Dict[str, Any]):
        now = now_iso()
        item = {**item, "created_at": now, "updated_at": now}
        with storage_errors(self.entity_name, "create", item["id"]):
            saved = self.store.put(self.table, item)
        logger.info("Created %s %s", self.entity_name, item["id"])
        return self._to_model(saved)

    def update(self, id: str, changes: Dict[str, Any]):
        """Partial, last-write-wins update of an existing item."""
        changes = {k: v for k, v in changes.items() if k != "id" and v is not None}
        check_rating(changes.get("rating"))
        if not changes:
            return self.get_by_id_or_raise(id)
        changes["updated_at"] = now_iso()
        try:
            with storage_errors(self.entity_name, "update", id):
                item = self.store.update(self.table, id, changes)
        except ItemMissing:
            raise NotFoundError(self.entity_name, id)
        logger.info("Updated %s %s", self.entity_name, id)
        return self._to_model(item)

    def delete(self, id: str) -> None:
        with storage_errors(self.entity_name, "delete", id):
            deleted = self.store.delete(self.table, id)
        if not deleted:
            raise NotFoundError(self.entity_name, id)
        logger.info("Deleted %s %s", self.entity_name, id)
