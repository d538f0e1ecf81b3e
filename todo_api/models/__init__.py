"""Data models for the Todo API.

This package contains Pydantic models for request/response validation
and the mapping between API payloads and MongoDB documents.
"""
