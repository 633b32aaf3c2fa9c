"""
File-backed user store.

The whole user list lives in a single JSON array file. Every read loads the
full file; every creation rewrites the full file. There is no caching and no
locking: concurrent writers can overwrite each other (last writer wins).

Writes go to a temporary file in the same directory which is then renamed
over the original, so a crash mid-write leaves the previous contents intact.
"""

import json
import os
import stat
import tempfile
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, EmailStr
from pydantic import ValidationError as PydanticValidationError


class NewUser(BaseModel):
    """Candidate user record accepted by create_user (no id, no extra fields)."""

    model_config = ConfigDict(extra="forbid", strict=True)

    name: str
    email: EmailStr
    address: str
    phone: str


class StoreError(Exception):
    """Base class for user store failures."""


class StoreReadError(StoreError):
    """The backing file is missing, unreadable, or not a JSON array."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read users from {path}: {reason}")


class StoreWriteError(StoreError):
    """The backing file could not be rewritten."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot write users to {path}: {reason}")


class ValidationError(StoreError):
    """
    A candidate user failed validation.

    ``messages`` holds one ``field: message`` entry per invalid or
    disallowed field.
    """

    def __init__(self, messages: List[str]):
        self.messages = messages
        super().__init__(f"Validation failed: {', '.join(messages)}")


def validate_user(candidate: Any) -> Dict[str, str]:
    """
    Validate a candidate record against the user schema.

    Args:
        candidate: Mapping with name, email, address and phone

    Returns:
        The validated fields as a plain dict

    Raises:
        ValidationError: If a field is missing, mistyped, malformed or extra
    """
    if not isinstance(candidate, dict):
        raise ValidationError([f"user: expected an object, got {type(candidate).__name__}"])
    try:
        user = NewUser.model_validate(candidate)
    except PydanticValidationError as e:
        messages = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]) or "user"
            messages.append(f"{field}: {error['msg']}")
        raise ValidationError(messages) from e
    return user.model_dump()


class UserStore:
    """
    User directory persisted as one indented JSON array.

    IDs are assigned as ``len(users) + 1`` at creation time, so they stay
    dense and sequential as long as nothing is removed.
    """

    def __init__(self, path: str):
        """
        Initialize the store.

        Args:
            path: Path to the JSON file holding the user array
        """
        self.path = path

    def list_users(self) -> List[Dict[str, Any]]:
        """
        Read all users from the backing file.

        Raises:
            StoreReadError: If the file is missing, unreadable or not an array
        """
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                users = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error reading {}: {}", self.path, e)
            raise StoreReadError(self.path, str(e)) from e

        if not isinstance(users, list):
            logger.error("Error reading {}: expected a JSON array", self.path)
            raise StoreReadError(self.path, f"expected a JSON array, got {type(users).__name__}")

        logger.debug("Loaded {} users from {}", len(users), self.path)
        return users

    def get_user(self, user_id: int) -> Optional[Dict[str, Any]]:
        """Return the user with the given ID, or None."""
        for user in self.list_users():
            if user.get("id") == user_id:
                return user
        return None

    def create_user(self, candidate: Any) -> int:
        """
        Validate and append a new user, then rewrite the backing file.

        Args:
            candidate: Mapping with exactly name, email, address and phone

        Returns:
            The ID assigned to the new user

        Raises:
            ValidationError: If the candidate does not match the user schema
            StoreReadError: If the current users cannot be loaded
            StoreWriteError: If the updated list cannot be written
        """
        fields = validate_user(candidate)
        users = self.list_users()

        new_user = {"id": len(users) + 1, **fields}
        users.append(new_user)
        self._write(users)

        logger.info("Created user {} with ID {}", new_user["name"], new_user["id"])
        return new_user["id"]

    def _write(self, users: List[Dict[str, Any]]) -> None:
        """Atomically replace the backing file with ``users``."""
        directory = os.path.dirname(os.path.abspath(self.path))
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".users-", suffix=".json")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(users, f, indent=2)
            if os.path.exists(self.path):
                os.chmod(tmp_path, stat.S_IMODE(os.stat(self.path).st_mode))
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error("Error writing {}: {}", self.path, e)
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise StoreWriteError(self.path, str(e)) from e

        logger.debug("Wrote {} users to {}", len(users), self.path)
