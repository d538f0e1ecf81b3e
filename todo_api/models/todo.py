"""
Todo models.

Pydantic schemas for:
- Todo documents as stored in MongoDB and returned by the API
- Todo creation requests
- Acknowledgement and error responses

The document key ``_id`` is kept as the wire name of the identifier so that
API payloads match the stored documents.
"""

from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator


class Todo(BaseModel):
    """A todo item."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = Field(
        default=None,
        alias="_id",
        description="MongoDB ObjectId as a 24-character hex string"
    )
    completed: bool = Field(default=False, description="Completion flag")
    body: str = Field(..., description="Todo text")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Optional[str]:
        """Render ObjectId values as hex strings."""
        if isinstance(v, ObjectId):
            return str(v)
        return v

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "Todo":
        """Build a Todo from a raw MongoDB document."""
        return cls.model_validate(document)


class TodoCreate(BaseModel):
    """
    Todo creation request.

    Only ``body`` and ``completed`` are taken from the caller; any other key,
    including ``_id``, is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    completed: bool = False
    body: str = ""

    @field_validator("body", mode="before")
    @classmethod
    def null_body_is_empty(cls, v: Any) -> Any:
        """Treat an explicit null body as empty."""
        return "" if v is None else v

    def to_document(self) -> Dict[str, Any]:
        """Document inserted into MongoDB (the driver assigns ``_id``)."""
        return {"completed": self.completed, "body": self.body}


class SuccessResponse(BaseModel):
    """Acknowledgement for update and delete operations."""
    success: bool = True


class ErrorResponse(BaseModel):
    """Client error response."""
    error: str
