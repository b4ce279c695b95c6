#!/usr/bin/env python3
"""
collection_manager.py
--------------------
Manages shared collections and their membership.

A collection has one owner (never stored as a member row) and any number
of members who joined with its invite code. Members can see the
collection and its entries and can leave; everything else (rename,
delete, invite rotation, removing members) is reserved for the owner.
Denied operations are silent: they return None/False and write nothing.

Usage:
    with db.session_scope():
        shelf = db.collections.create(alice, {"name": "Reading"})
        db.collections.join(bob, shelf.invite_code)
        db.collections.visible_to(bob.id)   # [(shelf, 2)]
"""
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError

from interne.core.exceptions import FormValidationError
from interne.core.validators import DataValidator
from interne.database.decorators import handle_db_errors, log_database_operation
from interne.database.models import Collection, CollectionMember, User, new_invite_code
from interne.engine.access import (
    can_leave_collection,
    can_mutate_collection,
    can_view_collection,
    should_join_collection,
)
from .base_manager import Actor, BaseManager, _actor_id


class CollectionManager(BaseManager):
    """Manages Collection and CollectionMember rows."""

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_collection")
    def get(self, actor: Actor, collection_id: int) -> Optional[Collection]:
        """
        Retrieve a collection the actor owns or belongs to.

        Returns:
            Collection, or None if absent or hidden from the actor
        """
        user_id = _actor_id(actor)
        collection = self.session.get(Collection, collection_id)
        if collection is None or user_id is None:
            return None
        if not can_view_collection(user_id, collection, self._membership(user_id)):
            return None
        return collection

    @handle_db_errors
    @log_database_operation("get_visible_collections")
    def visible_to(self, user_id: int) -> List[Tuple[Collection, int]]:
        """
        Collections the user owns or has joined, by name.

        Returns:
            (collection, member_count) pairs; the count includes the owner
        """
        members = (
            select(func.count(CollectionMember.user_id))
            .where(CollectionMember.collection_id == Collection.id)
            .correlate(Collection)
            .scalar_subquery()
        )
        joined = select(CollectionMember.collection_id).where(
            CollectionMember.user_id == user_id
        )
        stmt = (
            select(Collection, (members + 1).label("member_count"))
            .where(or_(Collection.owner_id == user_id, Collection.id.in_(joined)))
            .order_by(Collection.name, Collection.id)
        )
        return [(collection, count) for collection, count in self.session.execute(stmt)]

    @handle_db_errors
    @log_database_operation("is_collection_member")
    def is_member(self, collection_id: int, user_id: int) -> bool:
        """True if the user has a membership row (owners do not)."""
        return (
            self.session.get(CollectionMember, (collection_id, user_id)) is not None
        )

    @handle_db_errors
    @log_database_operation("is_collection_owner")
    def is_owner(self, collection_id: int, user_id: int) -> bool:
        collection = self.session.get(Collection, collection_id)
        return collection is not None and collection.owner_id == user_id

    @handle_db_errors
    @log_database_operation("get_collection_members")
    def members(
        self, collection: Union[Collection, int], actor: Actor
    ) -> Optional[List[User]]:
        """
        Members of a collection in joining order, owner excluded.

        Returns:
            List of users, or None if the actor cannot see the collection
        """
        resolved = self._resolve_object(collection, Collection)
        if resolved is None or self.get(actor, resolved.id) is None:
            return None
        collection_id = resolved.id

        stmt = (
            select(User)
            .join(CollectionMember, CollectionMember.user_id == User.id)
            .where(CollectionMember.collection_id == collection_id)
            .order_by(CollectionMember.joined_at, User.id)
        )
        return list(self.session.scalars(stmt))

    # -------------------------------------------------------------------------
    # Owner operations
    # -------------------------------------------------------------------------

    def _validate_name(self, metadata: Dict[str, Any]) -> str:
        errors = DataValidator.validate_collection_fields(metadata)
        if errors:
            raise FormValidationError(errors)
        return DataValidator.normalize_string(metadata["name"])

    @handle_db_errors
    @log_database_operation("create_collection")
    def create(self, owner: Actor, metadata: Dict[str, Any]) -> Collection:
        """
        Create a collection owned by `owner` with a fresh invite code.

        Args:
            owner: Owning user
            metadata: Dictionary with key:
                - name: Display name (required, under 100 characters)

        Raises:
            FormValidationError: If the name is missing or too long
        """
        name = self._validate_name(metadata)
        collection = Collection(owner_id=_actor_id(owner), name=name)
        self.session.add(collection)
        self.session.flush()

        if self.logger:
            self.logger.log_debug(
                f"Created collection: {name}", {"collection_id": collection.id}
            )

        return collection

    @handle_db_errors
    @log_database_operation("rename_collection")
    def rename(
        self, actor: Actor, collection_id: int, metadata: Dict[str, Any]
    ) -> Optional[Collection]:
        """
        Rename a collection.

        Returns:
            The collection, or None if the actor is not its owner

        Raises:
            FormValidationError: If the new name is missing or too long
        """
        collection = self.session.get(Collection, collection_id)
        if collection is None or not can_mutate_collection(_actor_id(actor), collection):
            return None

        collection.name = self._validate_name(metadata)
        self.session.flush()
        return collection

    @handle_db_errors
    @log_database_operation("delete_collection")
    def delete(self, actor: Actor, collection_id: int) -> bool:
        """
        Delete a collection together with its entries and memberships.

        Returns:
            True if deleted, False if absent or not owned by the actor
        """
        collection = self.session.get(Collection, collection_id)
        if collection is None or not can_mutate_collection(_actor_id(actor), collection):
            return False

        self.session.delete(collection)
        self.session.flush()
        return True

    @handle_db_errors
    @log_database_operation("regenerate_collection_invite")
    def regenerate_invite(self, actor: Actor, collection_id: int) -> Optional[str]:
        """
        Replace the invite code; the old code stops working immediately.

        Returns:
            The new code, or None if the actor is not the owner
        """
        collection = self.session.get(Collection, collection_id)
        if collection is None or not can_mutate_collection(_actor_id(actor), collection):
            return None

        collection.invite_code = new_invite_code()
        self.session.flush()
        return collection.invite_code

    @handle_db_errors
    @log_database_operation("remove_collection_member")
    def remove_member(self, actor: Actor, collection_id: int, member_id: int) -> bool:
        """
        Remove another user's membership.

        Returns:
            True if a membership row was removed
        """
        collection = self.session.get(Collection, collection_id)
        if collection is None or not can_mutate_collection(_actor_id(actor), collection):
            return False

        membership = self.session.get(CollectionMember, (collection_id, member_id))
        if membership is None:
            return False

        self.session.delete(membership)
        self.session.flush()
        return True

    # -------------------------------------------------------------------------
    # Member operations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("join_collection")
    def join(self, actor: Actor, invite_code: Optional[str]) -> Optional[Collection]:
        """
        Join the collection whose current invite code is presented.

        Joining twice, or joining one's own collection, changes nothing.

        Returns:
            The collection, or None for an unknown code
        """
        user_id = _actor_id(actor)
        code = DataValidator.normalize_string(invite_code)
        if user_id is None or code is None:
            return None

        collection = self.session.scalars(
            select(Collection).where(Collection.invite_code == code)
        ).first()
        if collection is None:
            return None

        if should_join_collection(user_id, collection, self._membership(user_id)):
            try:
                with self.session.begin_nested():
                    self.session.add(
                        CollectionMember(collection_id=collection.id, user_id=user_id)
                    )
            except IntegrityError:
                # Concurrent join already inserted the row
                pass

            if self.logger:
                self.logger.log_debug(
                    "User joined collection",
                    {"collection_id": collection.id, "user_id": user_id},
                )

        return collection

    @handle_db_errors
    @log_database_operation("leave_collection")
    def leave(self, actor: Actor, collection_id: int) -> bool:
        """
        Remove the actor's own membership. Owners cannot leave.

        Returns:
            True if a membership row was removed
        """
        user_id = _actor_id(actor)
        collection = self.session.get(Collection, collection_id)
        if collection is None or user_id is None:
            return False
        if not can_leave_collection(user_id, collection, self._membership(user_id)):
            return False

        membership = self.session.get(CollectionMember, (collection_id, user_id))
        self.session.delete(membership)
        self.session.flush()
        return True
