"""
Todo repository for MongoDB operations.

Provides async CRUD operations on the todo collection using the pymongo
async API. Failures are logged and re-raised unchanged.
"""

from typing import List

import structlog
from bson import ObjectId
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from todo_api.models.todo import Todo, TodoCreate

logger = structlog.get_logger(__name__)


class TodoRepository:
    """Repository for todo document operations."""

    def __init__(self, collection: AsyncCollection):
        """
        Initialize todo repository.

        Args:
            collection: Async MongoDB collection holding todo documents
        """
        self.collection = collection

    async def list_todos(self) -> List[Todo]:
        """
        List every todo in storage order.

        Returns:
            All todos; empty list when the collection is empty
        """
        try:
            todos = []
            async for document in self.collection.find({}):
                todos.append(Todo.from_document(document))

            logger.debug("todos_listed", count=len(todos))
            return todos

        except PyMongoError as e:
            logger.error("todo_list_failed", error=str(e))
            raise

    async def create_todo(self, todo: TodoCreate) -> Todo:
        """
        Insert a new todo.

        Args:
            todo: Validated creation request

        Returns:
            Created todo with its storage-generated id
        """
        document = todo.to_document()
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error("todo_create_failed", error=str(e))
            raise

        created = Todo(id=result.inserted_id, completed=todo.completed, body=todo.body)
        logger.info("todo_created", todo_id=created.id, completed=created.completed)
        return created

    async def complete_todo(self, todo_id: ObjectId) -> None:
        """
        Mark a todo as completed.

        No existence check is made; completing a missing or already
        completed todo is a no-op.

        Args:
            todo_id: Todo ObjectId
        """
        try:
            result = await self.collection.update_one(
                {"_id": todo_id},
                {"$set": {"completed": True}}
            )
        except PyMongoError as e:
            logger.error("todo_complete_failed", error=str(e), todo_id=str(todo_id))
            raise

        logger.info(
            "todo_completed",
            todo_id=str(todo_id),
            matched_count=result.matched_count
        )

    async def delete_todo(self, todo_id: ObjectId) -> None:
        """
        Delete a todo if it exists.

        Args:
            todo_id: Todo ObjectId
        """
        try:
            result = await self.collection.delete_one({"_id": todo_id})
        except PyMongoError as e:
            logger.error("todo_delete_failed", error=str(e), todo_id=str(todo_id))
            raise

        logger.info(
            "todo_deleted",
            todo_id=str(todo_id),
            deleted_count=result.deleted_count
        )
