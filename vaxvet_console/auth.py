"""
Process-wide auth store.

Holds the bearer token and the signed-in user, persisted to a JSON file so a
restarted console keeps its session. There is no expiry or refresh handling:
a rejected token simply surfaces as a failed request.
"""

import json
from pathlib import Path
from typing import Optional

from loguru import logger
from pydantic import ValidationError

from .schemas.auth import CurrentUser


class AuthStore:
    """Current token and user identity."""

    def __init__(self, storage_path: Optional[Path] = None):
        self.storage_path = Path(storage_path).expanduser() if storage_path else None
        self.user: Optional[CurrentUser] = None
        self.token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def role(self) -> str:
        return (self.user.role or "").lower() if self.user else ""

    def get_token(self) -> Optional[str]:
        return self.token

    def load(self) -> bool:
        """
        Restore a previously persisted session.

        Returns:
            True if both a token and a user were restored
        """
        if not self.storage_path or not self.storage_path.exists():
            return False

        try:
            stored = json.loads(self.storage_path.read_text(encoding="utf-8"))
            token = stored.get("token")
            user = stored.get("user")
            if not token or not user:
                return False
            self.user = CurrentUser.model_validate(user)
            self.token = token
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable session file {self.storage_path}: {e}")
            return False

        logger.info(f"Restored session for {self.user.user_name}")
        return True

    def login(self, user: CurrentUser, token: str) -> None:
        """Set and persist the current session."""
        self.user = user
        self.token = token
        self._persist()
        logger.info(f"User {user.user_name} signed in")

    def logout(self) -> None:
        """Clear the current session and its persisted copy."""
        if self.user:
            logger.info(f"User {self.user.user_name} signed out")
        self.user = None
        self.token = None

        if self.storage_path and self.storage_path.exists():
            self.storage_path.unlink()

    def _persist(self) -> None:
        if not self.storage_path:
            return

        self.storage_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "token": self.token,
            "user": self.user.model_dump(by_alias=True) if self.user else None,
        }
        self.storage_path.write_text(json.dumps(payload), encoding="utf-8")


class LoginRequired(Exception):
    """Raised by guarded screens when nobody is signed in."""
