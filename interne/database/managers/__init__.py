#!/usr/bin/env python3
"""
managers package
--------------------
Entity managers for the Interne database.

Each manager handles the operations of one entity type, inheriting the
shared helpers of BaseManager. Managers never commit: the enclosing
InterneDB.session_scope() owns the transaction.

Available Managers:
    BaseManager: Base class with retry, get-or-create and membership helpers
    UserManager: User creation and invite-code authentication
    EntryManager: Entries, visits and filtered listings
    CollectionManager: Collections and membership
    TagManager: Tags, entry links and per-user counts

Usage:
    from interne.database.managers import EntryManager

    entry_mgr = EntryManager(session, logger)
"""
from .base_manager import BaseManager
from .user_manager import UserManager
from .tag_manager import TagManager
from .entry_manager import EntryManager
from .collection_manager import CollectionManager

__all__ = [
    "BaseManager",
    "UserManager",
    "TagManager",
    "EntryManager",
    "CollectionManager",
]
