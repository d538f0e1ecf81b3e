"""Unit tests for todo models and ID parsing."""

import pytest
from bson import ObjectId

from todo_api.dependencies import get_todo_id
from todo_api.errors import TodoValidationError
from todo_api.models.todo import Todo, TodoCreate


class TestTodo:

    def test_from_document_renders_object_id_as_hex(self):
        oid = ObjectId()

        todo = Todo.from_document({"_id": oid, "completed": True, "body": "buy milk"})

        assert todo.id == str(oid)
        assert len(todo.id) == 24
        assert todo.completed is True

    def test_serializes_id_under_document_key(self):
        oid = ObjectId()
        todo = Todo(id=oid, body="buy milk")

        assert todo.model_dump(by_alias=True) == {
            "_id": str(oid),
            "completed": False,
            "body": "buy milk",
        }

    def test_missing_id_is_omitted(self):
        todo = Todo(body="buy milk")

        assert todo.model_dump(by_alias=True, exclude_none=True) == {
            "completed": False,
            "body": "buy milk",
        }


class TestTodoCreate:

    def test_defaults(self):
        todo = TodoCreate()

        assert todo.body == ""
        assert todo.completed is False

    def test_null_body_is_empty(self):
        todo = TodoCreate.model_validate({"body": None})

        assert todo.body == ""

    def test_ignores_unknown_fields(self):
        todo = TodoCreate.model_validate({"_id": str(ObjectId()), "body": "x", "extra": 1})

        assert todo.to_document() == {"completed": False, "body": "x"}


class TestTodoId:

    def test_valid_hex_id(self):
        oid = ObjectId()

        assert get_todo_id(str(oid)) == oid

    @pytest.mark.parametrize("bad_id", ["not-an-id", "", "abc", "g" * 24, "0" * 25])
    def test_invalid_id_raises(self, bad_id):
        with pytest.raises(TodoValidationError) as exc_info:
            get_todo_id(bad_id)

        assert exc_info.value.message == "Invalid Todo ID"
