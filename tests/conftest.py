"""
Shared fixtures for Todo API tests.

Provides an in-memory stand-in for an async MongoDB collection so that the
real TodoRepository and routers can be exercised without a database.
"""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from todo_api.config import Settings
from todo_api.main import create_app
from todo_api.repositories.todo_repo import TodoRepository


class InMemoryCollection:
    """Async collection double supporting the operations the repository uses."""

    def __init__(self):
        self.documents: Dict[ObjectId, Dict[str, Any]] = {}
        self.calls: List[str] = []
        self.error: Optional[Exception] = None

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.error is not None:
            raise self.error

    def find(self, filter: Dict[str, Any]):
        self._record("find")
        return self._iterate(list(self.documents.values()))

    async def _iterate(self, documents):
        for document in documents:
            yield dict(document)

    async def insert_one(self, document: Dict[str, Any]):
        self._record("insert_one")
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = dict(document)
        return SimpleNamespace(inserted_id=document["_id"])

    async def update_one(self, filter: Dict[str, Any], update: Dict[str, Any]):
        self._record("update_one")
        document = self.documents.get(filter["_id"])
        if document is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        changes = update["$set"]
        modified = any(document.get(k) != v for k, v in changes.items())
        document.update(changes)
        return SimpleNamespace(matched_count=1, modified_count=int(modified))

    async def delete_one(self, filter: Dict[str, Any]):
        self._record("delete_one")
        deleted = self.documents.pop(filter["_id"], None)
        return SimpleNamespace(deleted_count=0 if deleted is None else 1)


@pytest.fixture
def collection() -> InMemoryCollection:
    return InMemoryCollection()


@pytest.fixture
def repository(collection) -> TodoRepository:
    return TodoRepository(collection)


@pytest.fixture
def settings() -> Settings:
    """Development settings isolated from any local .env file."""
    return Settings(_env_file=None, env="development", log_format="text")


@pytest.fixture
def app(settings, repository):
    """Application with the repository installed without running the lifespan."""
    application = create_app(settings)
    application.state.todo_repository = repository
    return application


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def storage_down(collection) -> InMemoryCollection:
    """Make every collection operation fail as if MongoDB were unreachable."""
    collection.error = ServerSelectionTimeoutError("No servers available")
    return collection
