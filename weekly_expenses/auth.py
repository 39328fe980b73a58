"""Email/password identity for the multi-user variant.

Accounts live in the ``users`` table of the same SQLite file as the
expense data. Passwords are stored as werkzeug password hashes.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from .db import Database
from .errors import AuthError, StoreError
from .models import User
from .storage import utc_timestamp

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def normalize_email(email: Optional[str]) -> str:
    return (email or '').strip().lower()


class SqliteAuthProvider:
    """Sign-up, sign-in and the current session user."""

    def __init__(self, database: Optional[Database] = None):
        self.database = database or Database()
        self.database.init_db()
        self._user: Optional[User] = None

    def current_user(self) -> Optional[User]:
        return self._user

    def sign_in(self, email: str, password: str) -> User:
        """Authenticate and make the account the session user.

        Raises:
            AuthError: If the email is unknown or the password is wrong.
        """
        email = normalize_email(email)
        if not email or not password:
            raise AuthError("Email and password are required")
        row = self._find(email)
        if row is None or not check_password_hash(row['password_hash'], password):
            logger.warning("Failed sign-in for %s", email)
            raise AuthError("Invalid login credentials")
        self._user = User(id=row['id'], email=row['email'], created_at=row['created_at'])
        logger.info("Signed in %s", email)
        return self._user

    def sign_up(self, email: str, password: str) -> User:
        """Create an account, or sign in if it already exists.

        Existing credentials are tried first so that pressing "create
        account" with a known email and the right password simply signs
        in. A known email with a different password is rejected.
        """
        email = normalize_email(email)
        if not email or not password:
            raise AuthError("Email and password are required")
        if '@' not in email:
            raise AuthError("Invalid email address")
        try:
            return self.sign_in(email, password)
        except AuthError:
            if self._find(email) is not None:
                raise AuthError("User already registered")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")

        user = User(id=str(uuid.uuid4()), email=email, created_at=utc_timestamp())
        try:
            with self.database.connect() as conn:
                conn.execute(
                    "INSERT INTO users (id, email, password_hash, created_at) VALUES (?, ?, ?, ?)",
                    (user.id, user.email, generate_password_hash(password), user.created_at),
                )
                conn.commit()
        except sqlite3.IntegrityError as exc:
            raise AuthError("User already registered") from exc
        except sqlite3.Error as exc:
            logger.error("Could not create account for %s: %s", email, exc)
            raise StoreError("Could not create the account") from exc
        logger.info("Created account %s", email)
        return self.sign_in(email, password)

    def sign_out(self) -> None:
        if self._user is not None:
            logger.info("Signed out %s", self._user.email)
        self._user = None

    def _find(self, email: str) -> Optional[sqlite3.Row]:
        try:
            with self.database.connect() as conn:
                conn.row_factory = sqlite3.Row
                return conn.execute(
                    "SELECT id, email, password_hash, created_at FROM users WHERE email = ?",
                    (email,),
                ).fetchone()
        except sqlite3.Error as exc:
            logger.error("Could not look up account %s: %s", email, exc)
            raise StoreError("Could not look up the account") from exc
