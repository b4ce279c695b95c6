#!/usr/bin/env python3
"""
base_manager.py
--------------------
Base manager providing common utilities for the entity managers.
All entity managers should inherit from this class.

Key Features:
    - Get-or-create with insert-or-ignore semantics under races
    - Object resolution helpers (instance or id)
    - Membership facts for the access predicates

Usage:
    class EntryManager(BaseManager):
        def create(self, owner: User, metadata: Dict[str, Any]) -> Entry:
            ...
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from abc import ABC
from typing import Any, Dict, Optional, Protocol, Type, TypeVar, Union

# --- Third party imports ---
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Mapped, Session

# --- Local imports ---
from interne.core.exceptions import DatabaseError
from interne.core.logging_manager import InterneLogger
from interne.database.models import Collection, CollectionMember, User
from interne.engine.access import Membership


class HasId(Protocol):
    """Protocol for objects that have an id attribute."""

    id: Mapped[int]


T = TypeVar("T", bound=HasId)
Actor = Union[User, int]


def _actor_id(actor: Optional[Actor]) -> Optional[int]:
    """The acting user's id; None stands for an unauthenticated caller."""
    if actor is None:
        return None
    return actor.id if isinstance(actor, User) else actor


class BaseManager(ABC):
    """
    Base manager shared by all entity managers.

    Attributes:
        session: SQLAlchemy session for database operations
        logger: Optional logger for operation tracking
    """

    def __init__(self, session: Session, logger: Optional[InterneLogger] = None):
        """
        Initialize the base manager.

        Args:
            session: SQLAlchemy session
            logger: Optional logger for operation tracking
        """
        self.session = session
        self.logger = logger

    # -------------------------------------------------------------------------
    # Core Helper Methods
    # -------------------------------------------------------------------------

    def _get_or_create(
        self,
        model_class: Type[T],
        lookup_fields: Dict[str, Any],
        extra_fields: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Get an existing row or create it if it doesn't exist.

        The insert runs inside a SAVEPOINT. If a concurrent writer inserted
        the same row first, the unique constraint fires, only the
        savepoint is rolled back, and the existing row is returned.

        Args:
            model_class: ORM model class to query or create
            lookup_fields: Dictionary of field_name: value to filter/create
            extra_fields: Additional fields for new object creation only

        Returns:
            ORM instance of the model class

        Raises:
            DatabaseError: If the row can neither be created nor found
        """
        obj = self.session.query(model_class).filter_by(**lookup_fields).first()
        if obj:
            return obj

        fields = lookup_fields.copy()
        if extra_fields:
            fields.update(extra_fields)

        try:
            with self.session.begin_nested():
                obj = model_class(**fields)
                self.session.add(obj)
            return obj
        except IntegrityError:
            obj = self.session.query(model_class).filter_by(**lookup_fields).first()
            if obj:
                return obj
            raise DatabaseError(
                f"Failed to create {model_class.__name__} even after handling race condition"
            )

    def _resolve_object(self, item: Union[T, int], model_class: Type[T]) -> Optional[T]:
        """
        Resolve an item to an ORM object.

        Args:
            item: Object instance or ID
            model_class: Target model class

        Returns:
            Resolved ORM object, or None if no row has that id

        Raises:
            ValueError: If an instance is not persisted
            TypeError: If item type is invalid
        """
        if isinstance(item, model_class):
            if item.id is None:
                raise ValueError(f"{model_class.__name__} instance must be persisted")
            return item
        if isinstance(item, int) and not isinstance(item, bool):
            return self.session.get(model_class, item)
        raise TypeError(
            f"Expected {model_class.__name__} instance or int, got {type(item)}"
        )

    def _membership(self, user_id: int) -> Membership:
        """Load the collections a user owns or has joined."""
        owned = self.session.scalars(
            select(Collection.id).where(Collection.owner_id == user_id)
        ).all()
        member = self.session.scalars(
            select(CollectionMember.collection_id).where(
                CollectionMember.user_id == user_id
            )
        ).all()
        return Membership.of(owned, member)
