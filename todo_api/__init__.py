"""FastAPI service exposing a todo list backed by MongoDB.

This package provides the REST API endpoints for listing, creating,
completing and deleting todos.
"""

__version__ = "1.0.0"
