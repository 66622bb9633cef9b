"""
Entity Store Adapter.

A thin, uniform layer over a pymongo database. Every repository talks to
storage through an ``EntityStore``; items go in and come out with an ``id``
field which is stored as Mongo's ``_id``.

Every operation is atomic for a single key. ``scan_filtered`` is not isolated
from concurrent writers.

Storage faults (``pymongo.errors.PyMongoError``) are not caught here, the
repositories re-wrap them with entity context. The two conditions this module
reports itself are ``ConditionFailed`` and ``ItemMissing``.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pymongo
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError


class StoreError(Exception):
    pass


class ConditionFailed(StoreError):
    """A conditional write found its precondition false."""


class ItemMissing(StoreError):
    """An update addressed a key that does not exist."""


def to_item(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if doc is None:
        return None
    item = {k: v for k, v in doc.items() if k != "_id"}
    item["id"] = doc["_id"]
    return item


def to_document(item: Dict[str, Any]) -> Dict[str, Any]:
    doc = {k: v for k, v in item.items() if k != "id"}
    doc["_id"] = item["id"]
    return doc


class EntityStore:
    def __init__(self, db, timeout: Optional[float] = None):
        self.db = db
        self.timeout = timeout

    def _collection(self, table: str):
        return self.db[table]

    def get(self, table: str, key: str) -> Optional[Dict[str, Any]]:
        with pymongo.timeout(self.timeout):
            return to_item(self._collection(table).find_one({"_id": key}))

    def put(self, table: str, item: Dict[str, Any], if_absent: bool = False) -> Dict[str, Any]:
        doc = to_document(item)
        with pymongo.timeout(self.timeout):
            if if_absent:
                try:
                    self._collection(table).insert_one(doc)
                except DuplicateKeyError as exc:
                    raise ConditionFailed(str(exc)) from exc
            else:
                self._collection(table).replace_one({"_id": doc["_id"]}, doc, upsert=True)
        return to_item(doc)

    def update(
        self,
        table: str,
        key: str,
        changes: Dict[str, Any],
        condition: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        query = {"_id": key}
        if condition:
            query.update(condition)
        with pymongo.timeout(self.timeout):
            coll = self._collection(table)
            doc = coll.find_one_and_update(
                query,
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
            if doc is not None:
                return to_item(doc)
            # tell the two failure modes apart
            if condition and coll.find_one({"_id": key}, projection={"_id": 1}) is not None:
                raise ConditionFailed(f"Condition {condition} failed for {table}/{key}")
        raise ItemMissing(f"{table}/{key}")

    def increment(self, table: str, key: str, field: str, start: int) -> int:
        """Atomically bump ``field`` on ``key`` by one and return the new value.

        The counter record is seeded to ``start`` the first time it is used, so
        the first value handed out is ``start + 1``. The increment itself is
        always a single ``find_one_and_update``.
        """
        with pymongo.timeout(self.timeout):
            coll = self._collection(table)
            doc = coll.find_one_and_update(
                {"_id": key},
                {"$inc": {field: 1}},
                return_document=ReturnDocument.AFTER,
            )
            if doc is None:
                try:
                    coll.insert_one({"_id": key, field: start})
                except DuplicateKeyError:
                    pass  # seeded by a concurrent caller
                doc = coll.find_one_and_update(
                    {"_id": key},
                    {"$inc": {field: 1}},
                    return_document=ReturnDocument.AFTER,
                )
        return int(doc[field])

    def scan_filtered(
        self,
        table: str,
        predicate: Optional[Dict[str, Any]] = None,
        sort: Optional[Sequence[Tuple[str, int]]] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        with pymongo.timeout(self.timeout):
            cursor = self._collection(table).find(predicate or {})
            if sort:
                cursor = cursor.sort(list(sort))
            if limit:
                cursor = cursor.limit(limit)
            return [to_item(doc) for doc in cursor]

    def delete(self, table: str, key: str) -> bool:
        with pymongo.timeout(self.timeout):
            result = self._collection(table).delete_one({"_id": key})
        return result.deleted_count > 0

    def ping(self) -> bool:
        with pymongo.timeout(self.timeout):
            self.db.command("ping")
        return True
