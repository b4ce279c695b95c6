#!/usr/bin/env python3
"""
tag_manager.py
--------------------
Manages Tag entities and their links to entries.

Tags are global, lower-cased keywords shared by every user; usage
counts and tag listings are always scoped to one user's own entries.
Only the creator of an entry may change its tags. Link operations from
anyone else change nothing.

Key Features:
    - Get-or-create with insert-or-ignore semantics
    - Idempotent link/unlink to entries
    - Full replacement of an entry's tag set
    - Per-user usage counts for the tag cloud

Usage:
    tag_mgr = TagManager(session, logger)

    # Create or get a tag
    tag = tag_mgr.get_or_create("Python ")   # stored as "python"

    # Replace the tags of an entry (creator only)
    tag_mgr.set_entry_tags(user, entry, "python, reading")

    # Tag cloud for a user
    weights = tag_mgr.cloud_for_user(user.id)
"""
from typing import Any, List, Optional, Tuple

from sqlalchemy import func, select

from interne.core.exceptions import ValidationError
from interne.core.validators import DataValidator
from interne.database.decorators import handle_db_errors, log_database_operation
from interne.database.models import Entry, Tag, entry_tags
from interne.engine.access import can_mutate_entry
from interne.engine.tag_weights import TagWeight, compute_tag_weights
from .base_manager import Actor, BaseManager, _actor_id


class TagManager(BaseManager):
    """
    Manages Tag table operations and relationships.

    Linking is idempotent: the (entry, tag) pair is the primary key of
    entry_tags, and links already present are skipped.
    """

    # -------------------------------------------------------------------------
    # Core Operations
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_tag")
    def get(self, tag_name: str) -> Optional[Tag]:
        """
        Retrieve a tag by name (case-insensitive).

        Returns:
            Tag object if found, None otherwise
        """
        normalized = DataValidator.normalize_tag(tag_name)
        if not normalized:
            return None
        return self.session.scalars(select(Tag).where(Tag.name == normalized)).first()

    @handle_db_errors
    @log_database_operation("get_or_create_tag")
    def get_or_create(self, tag_name: str) -> Tag:
        """
        Get an existing tag or create it if it doesn't exist.

        Args:
            tag_name: The tag text (trimmed and lower-cased)

        Returns:
            Tag object (existing or newly created)

        Raises:
            ValidationError: If tag_name is empty after normalization
        """
        normalized = DataValidator.normalize_tag(tag_name)
        if not normalized:
            raise ValidationError("Tag cannot be empty")

        return self._get_or_create(Tag, {"name": normalized})

    # -------------------------------------------------------------------------
    # Relationship Management
    # -------------------------------------------------------------------------

    @staticmethod
    def _can_retag(actor: Actor, entry: Entry) -> bool:
        """
        Whether the actor may change the entry's tags.

        Raises:
            ValueError: If entry is not persisted
        """
        if entry.id is None:
            raise ValueError("Entry must be persisted before changing tags")
        return can_mutate_entry(_actor_id(actor), entry)

    @handle_db_errors
    @log_database_operation("link_tag_to_entry")
    def link_to_entry(self, actor: Actor, entry: Entry, tag_name: str) -> Optional[Tag]:
        """
        Link a tag to an entry (get-or-create the tag first).

        Linking a tag that is already attached is a no-op.

        Returns:
            The linked Tag, or None if the actor did not create the entry

        Raises:
            ValueError: If entry is not persisted
        """
        if not self._can_retag(actor, entry):
            return None

        tag = self.get_or_create(tag_name)

        if tag not in entry.tags:
            entry.tags.append(tag)
            self.session.flush()

            if self.logger:
                self.logger.log_debug(
                    "Linked tag to entry", {"tag": tag.name, "entry_id": entry.id}
                )

        return tag

    @handle_db_errors
    @log_database_operation("unlink_tag_from_entry")
    def unlink_from_entry(self, actor: Actor, entry: Entry, tag_name: str) -> bool:
        """
        Unlink a tag from an entry.

        Returns:
            True if tag was unlinked, False if it wasn't linked or the
            actor did not create the entry

        Raises:
            ValueError: If entry is not persisted
        """
        if not self._can_retag(actor, entry):
            return False

        tag = self.get(tag_name)
        if not tag or tag not in entry.tags:
            return False

        entry.tags.remove(tag)
        self.session.flush()

        if self.logger:
            self.logger.log_debug(
                "Unlinked tag from entry", {"tag": tag.name, "entry_id": entry.id}
            )

        return True

    @handle_db_errors
    @log_database_operation("set_entry_tags")
    def set_entry_tags(self, actor: Actor, entry: Entry, tags: Any) -> Optional[List[str]]:
        """
        Replace all tags of an entry.

        Args:
            actor: Acting user; must be the entry's creator
            entry: Persisted entry
            tags: Comma separated string or list of names

        Returns:
            The normalized tag names now attached, in input order, or
            None if the actor did not create the entry

        Raises:
            ValueError: If entry is not persisted
        """
        if not self._can_retag(actor, entry):
            return None

        names = DataValidator.split_tags(tags)
        wanted = [self.get_or_create(name) for name in names]

        for tag in list(entry.tags):
            if tag not in wanted:
                entry.tags.remove(tag)
        for tag in wanted:
            if tag not in entry.tags:
                entry.tags.append(tag)
        self.session.flush()

        if self.logger:
            self.logger.log_debug(
                "Updated entry tags", {"entry_id": entry.id, "total_count": len(names)}
            )

        return names

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    @handle_db_errors
    @log_database_operation("get_tag_counts_for_user")
    def counts_for_user(self, user_id: int) -> List[Tuple[str, int]]:
        """
        Tag usage counts over the user's own entries, ordered by name.

        Entries the user only sees through a collection do not count.
        """
        stmt = (
            select(Tag.name, func.count(func.distinct(entry_tags.c.entry_id)))
            .join(entry_tags, entry_tags.c.tag_id == Tag.id)
            .join(Entry, Entry.id == entry_tags.c.entry_id)
            .where(Entry.user_id == user_id)
            .group_by(Tag.id, Tag.name)
            .order_by(Tag.name)
        )
        return [(name, count) for name, count in self.session.execute(stmt)]

    def cloud_for_user(self, user_id: int) -> List[TagWeight]:
        """Tag cloud weights for the user's own entries."""
        return compute_tag_weights(self.counts_for_user(user_id))

    @handle_db_errors
    @log_database_operation("get_entries_for_tag")
    def entries_for_tag(self, user_id: int, tag_name: str) -> List[Entry]:
        """
        The user's own entries carrying a tag, newest first.

        Returns:
            Empty list when the tag does not exist
        """
        normalized = DataValidator.normalize_tag(tag_name)
        if not normalized:
            return []

        stmt = (
            select(Entry)
            .join(entry_tags, entry_tags.c.entry_id == Entry.id)
            .join(Tag, Tag.id == entry_tags.c.tag_id)
            .where(Tag.name == normalized, Entry.user_id == user_id)
            .order_by(Entry.created_at.desc(), Entry.id.desc())
        )
        return list(self.session.scalars(stmt))

    @handle_db_errors
    @log_database_operation("get_entry_tags")
    def get_for_entry(self, entry: Entry) -> List[str]:
        """Tag names of an entry, sorted alphabetically."""
        return entry.tag_names
