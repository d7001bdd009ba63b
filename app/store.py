"""
Persistence layer for tasks.

``TaskStore`` describes the operations the API needs; ``MongoTaskStore``
implements them over a single MongoDB collection. The store owns identity
generation, timestamps, the default status and the non-empty title rule.

Every mutation is a single-document atomic operation on the server
(``insert_one``, ``find_one_and_update``, ``find_one_and_delete``), so two
requests touching the same task never interleave partially; concurrent
updates resolve as last write wins per field.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId as BsonInvalidId
from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure, ExecutionTimeout, NetworkTimeout

from app.errors import InvalidId, NotFound, StoreUnavailable, ValidationError
from app.models import DEFAULT_STATUS, MUTABLE_FIELDS, Task, utcnow

logger = logging.getLogger(__name__)

# ServerSelectionTimeoutError and AutoReconnect both derive from ConnectionFailure
UNAVAILABLE_ERRORS = (ConnectionFailure, NetworkTimeout, ExecutionTimeout)

# Key under which the application keeps its store in ``app.extensions``
STORE_EXTENSION = "task_store"


class TaskStore(ABC):
    """Durable mapping from task identifier to Task record."""

    @abstractmethod
    def list(self) -> list[Task]:
        """Return every stored task in insertion order."""

    @abstractmethod
    def get(self, task_id: str) -> Task:
        """Return the task for ``task_id``."""

    @abstractmethod
    def create(self, fields: dict[str, Any]) -> Task:
        """Persist a new task built from ``fields`` and return it."""

    @abstractmethod
    def update(self, task_id: str, fields: dict[str, Any]) -> Task:
        """Merge ``fields`` into an existing task and return the result."""

    @abstractmethod
    def delete(self, task_id: str) -> Task:
        """Remove a task and return the removed record."""

    @abstractmethod
    def ping(self) -> bool:
        """Return True when the backing store is reachable."""


def _parse_id(task_id: str) -> ObjectId:
    """Convert a path identifier into an ObjectId or raise ``InvalidId``."""
    try:
        return ObjectId(task_id)
    except (BsonInvalidId, TypeError) as exc:
        raise InvalidId(f"Invalid task id: {task_id!r}") from exc


def _validate_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("'title' is required")
    return value.strip()


class MongoTaskStore(TaskStore):
    """
    Task store backed by a MongoDB collection.

    Args:
        collection: The collection holding task documents. Any object
            implementing the pymongo ``Collection`` API works, which keeps
            the store easy to exercise against an in-process double.
    """

    def __init__(self, collection: Collection) -> None:
        self.collection = collection

    def list(self) -> list[Task]:
        try:
            documents = list(self.collection.find().sort("_id", ASCENDING))
        except UNAVAILABLE_ERRORS as exc:
            raise self._unavailable("list", exc) from exc
        return [Task.from_document(doc) for doc in documents]

    def get(self, task_id: str) -> Task:
        object_id = _parse_id(task_id)
        try:
            document = self.collection.find_one({"_id": object_id})
        except UNAVAILABLE_ERRORS as exc:
            raise self._unavailable("get", exc) from exc
        if document is None:
            raise NotFound("Task not found")
        return Task.from_document(document)

    def create(self, fields: dict[str, Any]) -> Task:
        title = _validate_title(fields.get("title"))
        now = utcnow()
        document = {
            "_id": ObjectId(),
            "title": title,
            "description": fields.get("description"),
            "status": fields.get("status") or DEFAULT_STATUS,
            "created_at": now,
            "updated_at": now,
        }
        try:
            self.collection.insert_one(document)
        except UNAVAILABLE_ERRORS as exc:
            raise self._unavailable("create", exc) from exc

        return Task.from_document(document)

    def update(self, task_id: str, fields: dict[str, Any]) -> Task:
        object_id = _parse_id(task_id)

        changes = {name: fields[name] for name in MUTABLE_FIELDS if name in fields}
        if not changes:
            raise ValidationError("No valid fields to update")
        if "title" in changes:
            changes["title"] = _validate_title(changes["title"])
        if "status" in changes and not changes["status"]:
            raise ValidationError("'status' must not be empty")
        changes["updated_at"] = utcnow()

        try:
            document = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": changes},
                return_document=ReturnDocument.AFTER,
            )
        except UNAVAILABLE_ERRORS as exc:
            raise self._unavailable("update", exc) from exc
        if document is None:
            raise NotFound("Task not found")

        return Task.from_document(document)

    def delete(self, task_id: str) -> Task:
        object_id = _parse_id(task_id)
        try:
            document = self.collection.find_one_and_delete({"_id": object_id})
        except UNAVAILABLE_ERRORS as exc:
            raise self._unavailable("delete", exc) from exc
        if document is None:
            raise NotFound("Task not found")

        return Task.from_document(document)

    def ping(self) -> bool:
        try:
            self.collection.database.command("ping")
        except UNAVAILABLE_ERRORS as exc:
            logger.warning("Task store ping failed: %s", exc)
            return False
        return True

    @staticmethod
    def _unavailable(operation: str, exc: Exception) -> StoreUnavailable:
        logger.error("Task store unavailable during %s: %s", operation, exc)
        return StoreUnavailable("Task store unavailable")


def create_mongo_store(
    uri: str,
    db_name: str,
    collection_name: str,
    timeout_ms: int = 2000,
) -> MongoTaskStore:
    """
    Build a ``MongoTaskStore`` from connection settings.

    The client connects lazily, so an unreachable server only surfaces as
    ``StoreUnavailable`` on the first operation, bounded by ``timeout_ms``.

    Args:
        uri: MongoDB connection string.
        db_name: Database holding the task collection.
        collection_name: Name of the task collection.
        timeout_ms: Bound for server selection, connect and socket I/O.

    Returns:
        A store over the configured collection.
    """
    client: MongoClient = MongoClient(
        uri,
        serverSelectionTimeoutMS=timeout_ms,
        connectTimeoutMS=timeout_ms,
        socketTimeoutMS=timeout_ms,
    )
    logger.info("Using task collection %s.%s", db_name, collection_name)
    return MongoTaskStore(client[db_name][collection_name])
