#!/usr/bin/env python3
"""
entry_manager.py
--------------------
Manages Entry entities: creation, editing, deletion, visits and the
filtered listings built on top of them.

Access rules come from interne.engine.access. An entry is visible to its
creator and to everyone connected to its collection; only the creator
may edit, delete or visit it. Operations the actor is not allowed to
perform change nothing and return None/False, exactly as for an entry
that does not exist.

Key Features:
    - Field-level validation (FormValidationError) before any write
    - Visit recorded and dismissed_at updated in one transaction
    - Tag replacement on edit
    - Listings computed against a single clock reading

Usage:
    with db.session_scope():
        entry = db.entries.create(user, {
            "url": "https://example.com",
            "title": "Example",
            "duration": 3,
            "interval": "days",
            "tags": "reading, later",
        })
        db.entries.visit(user, entry.id)
        ready = db.entries.list_views(user, "ready")
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from sqlalchemy import func, or_, select

from interne.core.clock import Clock, system_clock
from interne.core.exceptions import FormValidationError, ValidationError
from interne.core.validators import DataValidator
from interne.database.decorators import handle_db_errors, log_database_operation
from interne.database.models import Entry, Interval, Visit
from interne.engine.access import Membership, can_mutate_entry, can_view_entry
from interne.engine.visibility import EntryFilter, EntryView, build_entry_views
from .base_manager import Actor, BaseManager, _actor_id
from .tag_manager import TagManager


class EntryManager(BaseManager):
    """
    Manages Entry table operations.

    Every public method takes the acting user (a User or its id) as an
    explicit argument.
    """

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _validate(
        self, metadata: Dict[str, Any], membership: Membership
    ) -> Tuple[Dict[str, Any], Dict[str, str]]:
        """
        Normalize entry input and collect field errors.

        Returns:
            (clean values, errors by field)
        """
        errors = DataValidator.validate_entry_fields(metadata)

        try:
            interval = Interval.parse(metadata.get("interval"))
        except ValidationError:
            interval = None
            errors["interval"] = "Unknown interval"

        collection_id = None
        raw_collection = metadata.get("collection_id")
        if DataValidator.normalize_string(raw_collection) is not None:
            collection_id = DataValidator.normalize_int(raw_collection)
            if collection_id not in membership.visible_collection_ids:
                errors["collection_id"] = "Unknown collection"

        clean = {
            "url": DataValidator.normalize_string(metadata.get("url")),
            "title": DataValidator.normalize_string(metadata.get("title")),
            "description": DataValidator.normalize_string(metadata.get("description")),
            "duration": DataValidator.normalize_int(metadata.get("duration")),
            "interval": interval,
            "collection_id": collection_id,
        }
        return clean, errors

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_entry")
    def get(self, actor: Actor, entry_id: int) -> Optional[Entry]:
        """
        Retrieve an entry the actor may see.

        Returns:
            Entry, or None if it does not exist or is hidden from the actor
        """
        user_id = _actor_id(actor)
        entry = self.session.get(Entry, entry_id)
        if entry is None or user_id is None:
            return None
        if not can_view_entry(user_id, entry, self._membership(user_id)):
            return None
        return entry

    @handle_db_errors
    @log_database_operation("get_visible_entries")
    def visible_to(self, user_id: int) -> List[Tuple[Entry, int]]:
        """
        Candidate set for listings: every entry the user may see with its visit count.

        Includes the user's own entries and all entries placed in
        collections the user owns or has joined, whoever created them.
        """
        visible = self._membership(user_id).visible_collection_ids
        condition = Entry.user_id == user_id
        if visible:
            condition = or_(condition, Entry.collection_id.in_(visible))

        visit_count = (
            select(func.count(Visit.id))
            .where(Visit.entry_id == Entry.id)
            .correlate(Entry)
            .scalar_subquery()
            .label("visit_count")
        )
        stmt = select(Entry, visit_count).where(condition).order_by(Entry.id)
        return [(entry, count) for entry, count in self.session.execute(stmt)]

    def list_views(
        self,
        actor: Actor,
        entry_filter: Union[EntryFilter, str, None] = EntryFilter.READY,
        clock: Clock = system_clock,
    ) -> List[EntryView]:
        """
        Filtered, ordered listing for the actor.

        The clock is read once; every entry in the listing is evaluated
        against that instant.
        """
        user_id = _actor_id(actor)
        if user_id is None:
            return []
        selector = EntryFilter.parse(entry_filter)
        rows = self.visible_to(user_id)
        return build_entry_views(rows, selector, clock.now())

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("create_entry")
    def create(self, owner: Actor, metadata: Dict[str, Any]) -> Entry:
        """
        Create a new entry owned by `owner`.

        Args:
            owner: Creating user
            metadata: Dictionary with keys:
                - url: http(s) link (required)
                - title: Display title (required, under 500 characters)
                - duration: Positive integer (required)
                - interval: hours|days|weeks|months|years (required)
                - description: Free text (optional)
                - collection_id: Collection the owner can see (optional)
                - tags: Comma separated string or list (optional)

        Returns:
            Created Entry object

        Raises:
            FormValidationError: With one message per invalid field
        """
        owner_id = _actor_id(owner)
        clean, errors = self._validate(metadata, self._membership(owner_id))
        if errors:
            raise FormValidationError(errors)

        entry = Entry(user_id=owner_id, **clean)
        self.session.add(entry)
        self.session.flush()

        if metadata.get("tags"):
            TagManager(self.session, self.logger).set_entry_tags(
                owner_id, entry, metadata["tags"]
            )

        if self.logger:
            self.logger.log_debug(
                f"Created entry: {entry.title}",
                {"entry_id": entry.id, "user_id": owner_id},
            )

        return entry

    @handle_db_errors
    @log_database_operation("update_entry")
    def update(
        self, actor: Actor, entry_id: int, metadata: Dict[str, Any]
    ) -> Optional[Entry]:
        """
        Replace the fields of an entry from a full edit form.

        Fields missing from metadata are treated as empty, like a
        submitted form. The tag set is replaced by metadata["tags"]
        (an absent or empty value clears it).

        Returns:
            Updated Entry, or None if the actor may not edit it

        Raises:
            FormValidationError: With one message per invalid field
        """
        user_id = _actor_id(actor)
        entry = self.session.get(Entry, entry_id)
        if entry is None or not can_mutate_entry(user_id, entry):
            return None

        membership = self._membership(user_id)
        clean, errors = self._validate(metadata, membership)
        # Keeping an entry in a collection the creator has since left is allowed
        if errors.get("collection_id") and clean["collection_id"] == entry.collection_id:
            errors.pop("collection_id")
        if errors:
            raise FormValidationError(errors)

        for field_name, value in clean.items():
            setattr(entry, field_name, value)
        TagManager(self.session, self.logger).set_entry_tags(
            user_id, entry, metadata.get("tags")
        )
        self.session.flush()

        return entry

    @handle_db_errors
    @log_database_operation("delete_entry")
    def delete(self, actor: Actor, entry_id: int) -> bool:
        """
        Delete an entry with its visits and tag links.

        Returns:
            True if deleted, False if absent or not the actor's entry
        """
        user_id = _actor_id(actor)
        entry = self.session.get(Entry, entry_id)
        if entry is None or not can_mutate_entry(user_id, entry):
            return False

        self.session.delete(entry)
        self.session.flush()

        if self.logger:
            self.logger.log_debug("Deleted entry", {"entry_id": entry_id, "user_id": user_id})

        return True

    @handle_db_errors
    @log_database_operation("visit_entry")
    def visit(
        self, actor: Actor, entry_id: int, clock: Clock = system_clock
    ) -> Optional[EntryView]:
        """
        Record a visit and restart the entry's review interval.

        The Visit row and the new dismissed_at are written in the
        caller's transaction, so either both persist or neither does.

        Returns:
            The refreshed view of the entry, or None if the actor may not visit it
        """
        user_id = _actor_id(actor)
        entry = self.session.get(Entry, entry_id)
        if entry is None or not can_mutate_entry(user_id, entry):
            return None

        now: datetime = clock.now()

        self.session.add(Visit(entry_id=entry.id, user_id=user_id, visited_at=now))
        entry.dismissed_at = now
        self.session.flush()

        visit_count = self.session.scalar(
            select(func.count(Visit.id)).where(Visit.entry_id == entry.id)
        )
        return build_entry_views([(entry, visit_count)], EntryFilter.ALL, now)[0]
