#!/usr/bin/env python3
"""
user_manager.py
--------------------
Manages User accounts.

Users are created administratively (there is no self-registration).
Each one receives a random invite code that doubles as the login
credential: authenticate() resolves a presented code to its user.

Usage:
    with db.session_scope():
        user = db.users.create({"name": "Alice", "email": "alice@example.com"})
        same = db.users.authenticate(user.invite_code)
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from interne.core.exceptions import DatabaseError, ValidationError
from interne.core.validators import DataValidator
from interne.database.decorators import handle_db_errors, log_database_operation
from interne.database.models import User
from .base_manager import BaseManager


class UserManager(BaseManager):
    """Creates, looks up and authenticates users."""

    @handle_db_errors
    @log_database_operation("get_user")
    def get(self, user_id: int) -> Optional[User]:
        """
        Retrieve a user by ID.

        Returns:
            User if found, None otherwise
        """
        return self.session.get(User, user_id)

    @handle_db_errors
    @log_database_operation("get_all_users")
    def get_all(self) -> List[User]:
        return list(self.session.scalars(select(User).order_by(User.id)))

    @handle_db_errors
    @log_database_operation("authenticate_user")
    def authenticate(self, invite_code: Optional[str]) -> Optional[User]:
        """
        Resolve a presented invite code to its user.

        Args:
            invite_code: Code typed at login (surrounding whitespace ignored)

        Returns:
            The matching User, or None for an empty or unknown code
        """
        code = DataValidator.normalize_string(invite_code)
        if code is None:
            return None
        return self.session.scalars(select(User).where(User.invite_code == code)).first()

    @handle_db_errors
    @log_database_operation("create_user")
    def create(self, metadata: Dict[str, Any]) -> User:
        """
        Create a new user with a fresh invite code.

        Args:
            metadata: Dictionary with keys:
                - name: Display name (required)
                - email: Email address (optional, unique)

        Returns:
            Created User object

        Raises:
            ValidationError: If name is blank
            DatabaseError: If the email is already registered
        """
        name = DataValidator.normalize_string(metadata.get("name"))
        if name is None:
            raise ValidationError("User name cannot be empty")

        email = DataValidator.normalize_string(metadata.get("email"))
        if email is not None:
            email = email.lower()
            taken = self.session.scalars(select(User).where(User.email == email)).first()
            if taken is not None:
                raise DatabaseError(f"User with email already exists: {email}")

        user = User(name=name, email=email)
        self.session.add(user)
        self.session.flush()

        if self.logger:
            self.logger.log_debug(f"Created user: {name}", {"user_id": user.id})

        return user
