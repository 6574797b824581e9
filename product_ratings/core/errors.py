"""
Store-level errors.

Data-access functions raise these instead of SQLAlchemy exceptions so the
HTTP layer can map them to responses without knowing the backend.
"""

from __future__ import annotations


class StoreError(Exception):
    """Any persistence or connectivity failure."""


class NotFound(StoreError):
    """A singular lookup matched no row."""


class ForeignKeyViolation(StoreError):
    """A referenced row does not exist."""
