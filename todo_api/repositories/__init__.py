"""Data access layer.

This package contains repository classes wrapping MongoDB collections.
"""
