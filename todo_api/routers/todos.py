"""
Todo router.

Provides REST API endpoints for:
- Listing all todos
- Creating a todo
- Marking a todo completed
- Deleting a todo

Validation errors are raised as TodoValidationError before any storage
call; storage errors propagate to the application's generic handler.
"""

from typing import List

import structlog
from bson import ObjectId
from fastapi import APIRouter, Depends, status

from todo_api.dependencies import get_todo_id, get_todo_repository
from todo_api.errors import EMPTY_BODY_MESSAGE, TodoValidationError
from todo_api.models.todo import ErrorResponse, SuccessResponse, Todo, TodoCreate
from todo_api.repositories.todo_repo import TodoRepository

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/todos",
    tags=["Todos"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request"},
    }
)


@router.get(
    "",
    response_model=List[Todo],
    response_model_exclude_none=True,
    summary="List Todos",
)
async def list_todos(
    repo: TodoRepository = Depends(get_todo_repository)
) -> List[Todo]:
    """Return every todo; an empty collection yields an empty list."""
    return await repo.list_todos()


@router.post(
    "",
    response_model=Todo,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
)
async def create_todo(
    todo: TodoCreate,
    repo: TodoRepository = Depends(get_todo_repository)
) -> Todo:
    """
    Create a todo.

    Args:
        todo: Request body; ``body`` must be non-empty
        repo: Todo repository

    Returns:
        Created todo including its new ``_id``

    Raises:
        TodoValidationError: If the body is empty
    """
    if todo.body == "":
        raise TodoValidationError(EMPTY_BODY_MESSAGE)

    return await repo.create_todo(todo)


@router.patch(
    "/{id}",
    response_model=SuccessResponse,
    summary="Complete Todo",
)
async def complete_todo(
    todo_id: ObjectId = Depends(get_todo_id),
    repo: TodoRepository = Depends(get_todo_repository)
) -> SuccessResponse:
    """Mark a todo completed. Succeeds even if no todo matched."""
    await repo.complete_todo(todo_id)
    return SuccessResponse()


@router.delete(
    "/{id}",
    response_model=SuccessResponse,
    summary="Delete Todo",
)
async def delete_todo(
    todo_id: ObjectId = Depends(get_todo_id),
    repo: TodoRepository = Depends(get_todo_repository)
) -> SuccessResponse:
    """Delete a todo. Succeeds even if no todo matched."""
    await repo.delete_todo(todo_id)
    return SuccessResponse()
