"""Accounts: registration, login, profile, password and role management."""

from __future__ import annotations

import logging

import bcrypt
from psycopg.errors import UniqueViolation

from pulseboard.config import AuthConfig
from pulseboard.core.models import ROLES
from pulseboard.core.utils import AuthenticationError, ConflictError, NotFoundError, ValidationError
from pulseboard.storage.database import Database, releases_connection

logger = logging.getLogger(__name__)

_PUBLIC_COLUMNS = "id, email, name, role, created_at"


def _public(row: dict) -> dict:
    return {
        "id": row["id"],
        "email": row["email"],
        "name": row["name"],
        "role": row["role"],
        "createdAt": row["created_at"].isoformat() if row["created_at"] else None,
    }


class UserManager:
    """User accounts. Passwords are stored as bcrypt hashes only."""

    def __init__(self, db: Database, config: AuthConfig | None = None):
        self.db = db
        self.config = config or AuthConfig()

    # --- password helpers ---

    def hash_password(self, password: str) -> str:
        salt = bcrypt.gensalt(rounds=self.config.bcrypt_rounds)
        return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")

    @staticmethod
    def check_password(password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    # --- accounts ---

    @releases_connection
    def register(self, email: str, password: str, name: str, role: str | None = None) -> dict:
        """Create an account. Only an explicit "ADMIN" role grants admin; anything else is VIEWER."""
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not email or not password or not name:
            raise ValidationError("Email, password, and name are required.")

        if self.db.execute_one("SELECT id FROM users WHERE email = %s", (email,)):
            raise ConflictError("A user with this email already exists.")

        try:
            row = self.db.execute_one(
                f"""
                INSERT INTO users (email, name, password_hash, role)
                VALUES (%s, %s, %s, %s)
                RETURNING {_PUBLIC_COLUMNS}
                """,
                (email, name, self.hash_password(password), "ADMIN" if role == "ADMIN" else "VIEWER"),
            )
        except UniqueViolation:
            # concurrent registration won the unique index
            self.db.rollback()
            raise ConflictError("A user with this email already exists.") from None
        self.db.commit()

        logger.info("User #%d registered (%s)", row["id"], row["role"])
        return _public(row)

    @releases_connection
    def authenticate(self, email: str, password: str) -> dict:
        """Check credentials. The same error covers unknown email and wrong password."""
        if not email or not password:
            raise ValidationError("Email and password are required.")

        row = self.db.execute_one(
            f"SELECT {_PUBLIC_COLUMNS}, password_hash FROM users WHERE email = %s",
            (email.strip().lower(),),
        )
        if row is None or not self.check_password(password, row["password_hash"]):
            logger.warning("Failed login for %s", email)
            raise AuthenticationError("Invalid email or password.")
        return _public(row)

    @releases_connection
    def get(self, user_id: int) -> dict:
        row = self.db.execute_one(
            f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE id = %s", (user_id,),
        )
        if row is None:
            raise NotFoundError("User not found.")
        return _public(row)

    @releases_connection
    def list_users(self) -> list[dict]:
        rows = self.db.execute(f"SELECT {_PUBLIC_COLUMNS} FROM users ORDER BY created_at ASC, id ASC")
        return [_public(r) for r in rows]

    @releases_connection
    def update_profile(self, user_id: int, name: str, email: str) -> dict:
        email = (email or "").strip().lower()
        name = (name or "").strip()
        if not name or not email:
            raise ValidationError("Name and email are required")

        existing = self.db.execute_one("SELECT id FROM users WHERE email = %s", (email,))
        if existing and existing["id"] != user_id:
            raise ConflictError("Email already in use")

        try:
            row = self.db.execute_one(
                f"""
                UPDATE users SET name = %s, email = %s, updated_at = NOW()
                WHERE id = %s
                RETURNING {_PUBLIC_COLUMNS}
                """,
                (name, email, user_id),
            )
        except UniqueViolation:
            self.db.rollback()
            raise ConflictError("Email already in use") from None
        if row is None:
            self.db.rollback()
            raise NotFoundError("User not found.")
        self.db.commit()
        logger.info("User #%d updated profile", user_id)
        return _public(row)

    @releases_connection
    def change_password(
        self, user_id: int, current_password: str, new_password: str, confirm_password: str,
    ) -> None:
        if not current_password or not new_password or not confirm_password:
            raise ValidationError("All password fields are required")
        if new_password != confirm_password:
            raise ValidationError("Passwords do not match")
        if len(new_password) < self.config.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.config.min_password_length} characters"
            )

        row = self.db.execute_one("SELECT password_hash FROM users WHERE id = %s", (user_id,))
        if row is None:
            raise NotFoundError("User not found.")
        if not self.check_password(current_password, row["password_hash"]):
            raise ValidationError("Current password is incorrect")

        self.db.execute(
            "UPDATE users SET password_hash = %s, updated_at = NOW() WHERE id = %s",
            (self.hash_password(new_password), user_id),
        )
        self.db.commit()
        logger.info("User #%d changed password", user_id)

    @releases_connection
    def update_role(self, actor_id: int, user_id: int, role: str) -> dict:
        """Admin action: change another user's role. Admins cannot demote themselves."""
        if user_id == actor_id:
            raise ValidationError("Cannot change your own role")
        if role not in ROLES:
            raise ValidationError("Invalid role")

        row = self.db.execute_one(
            f"""
            UPDATE users SET role = %s, updated_at = NOW()
            WHERE id = %s
            RETURNING {_PUBLIC_COLUMNS}
            """,
            (role, user_id),
        )
        if row is None:
            self.db.rollback()
            raise NotFoundError("User not found")
        self.db.commit()
        logger.info("User #%d set role of user #%d to %s", actor_id, user_id, role)
        return _public(row)
