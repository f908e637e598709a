#!/usr/bin/env python3
"""
Shared SQLAlchemy base and mixins for the Library Catalog API.

- UUID primary key (String(36)) with defaults
- created_at / updated_at timestamps
- save() that uses the DBStorage singleton
- SoftDeleteMixin that gives delete() soft-delete semantics

Notes:
- Timestamps get a Python-side default (microsecond precision, so
  "newest first" ordering is stable) and a server-side default for rows
  inserted outside the ORM.
- SoftDelete: put mixin FIRST in your model's inheritance list so its delete()
  wins via MRO.
  Example:
    class Author(SoftDeleteMixin, BaseModel, Base): ...
"""

from __future__ import annotations

from datetime import datetime, timezone
import uuid

# Importing 'models' gives access to the global 'storage' instance (DBStorage)
# defined in models/__init__.py
import models

from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

# Declarative base for all models
Base = declarative_base()


def _uuid_str() -> str:
    """Return a canonical UUIDv4 string (36 chars, with hyphens)."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseModel:
    """
    Base mixin for all persistent models.

    - id, created_at, updated_at
    - save() wired to DBStorage
    """

    id = Column(String(36), primary_key=True, default=_uuid_str, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    def __init__(self, *args, **kwargs):
        """
        Allow attribute initialization via kwargs without requiring a session here.
        If you pass created_at/updated_at explicitly (e.g., in tests), they will be set.
        """
        for key, value in kwargs.items():
            setattr(self, key, value)
        # Ensure an id exists if caller passed none
        if getattr(self, "id", None) is None:
            self.id = _uuid_str()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"

    def save(self):
        """Touch updated_at and commit the instance through DBStorage."""
        self.updated_at = utcnow()
        models.storage.new(self)
        models.storage.save()


class SoftDeleteMixin:
    """
    Adds a deleted_at timestamp and makes delete() a soft delete.
    Rows keep their relations (join rows are never removed).
    IMPORTANT: Place this mixin BEFORE BaseModel in your class base list.
    """

    deleted_at = Column(DateTime(timezone=True), nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self):
        """Explicit soft delete helper; sets deleted_at and commits."""
        self.deleted_at = utcnow()
        models.storage.new(self)
        models.storage.save()

    def delete(self):
        """Soft delete by setting deleted_at; persists via DBStorage."""
        self.soft_delete()
