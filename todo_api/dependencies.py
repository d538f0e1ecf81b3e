"""
FastAPI dependency injection for storage and request validation.

Provides injectable dependencies for:
- The MongoDB client and todo repository held on application state
- Todo ID path parameter parsing

Shared resources are created by the application lifespan and read from
``request.app.state`` so that tests can swap them without touching globals.
"""

from typing import Optional

import structlog
from bson import ObjectId
from fastapi import Request
from pymongo import AsyncMongoClient

from todo_api.errors import INVALID_ID_MESSAGE, TodoValidationError
from todo_api.repositories.todo_repo import TodoRepository

logger = structlog.get_logger(__name__)


def get_mongo_client(request: Request) -> Optional[AsyncMongoClient]:
    """
    Get the MongoDB client created at startup.

    Returns None before startup has connected, so readiness can report
    the service as not ready instead of failing.
    """
    return getattr(request.app.state, "mongo_client", None)


def get_todo_repository(request: Request) -> TodoRepository:
    """
    Get the todo repository.

    Example:
        @router.get("")
        async def list_todos(repo: TodoRepository = Depends(get_todo_repository)):
            return await repo.list_todos()

    Raises:
        RuntimeError: If the repository is not initialized
    """
    repository = getattr(request.app.state, "todo_repository", None)
    if repository is None:
        logger.error("todo_repository_not_initialized")
        raise RuntimeError(
            "Todo repository not initialized. It is created during application startup."
        )
    return repository


def get_todo_id(id: str) -> ObjectId:
    """
    Parse the ``id`` path parameter as a MongoDB ObjectId.

    Args:
        id: 24-character hexadecimal string

    Returns:
        Parsed ObjectId

    Raises:
        TodoValidationError: If the value is not a valid ObjectId
    """
    if not ObjectId.is_valid(id):
        raise TodoValidationError(INVALID_ID_MESSAGE)
    return ObjectId(id)
