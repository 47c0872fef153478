from __future__ import annotations

import itertools
import threading
from typing import Any

import bcrypt

DEMO_USERNAME = "demo"
DEMO_PASSWORD = "demo123"


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _public(record: dict[str, Any]) -> dict[str, Any]:
    return {"id": record["id"], "username": record["username"], "email": record["email"]}


class UserRegistry:
    """In-memory accounts keyed by username. User ids are opaque strings."""

    def __init__(self) -> None:
        self._users: dict[str, dict[str, Any]] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def register(self, username: str, email: str, password: str) -> dict[str, Any]:
        """Create an account. Returns ``{id, username, email}``."""
        password_hash = _hash_password(password)
        with self._lock:
            if username in self._users:
                raise ValueError("Username already taken")
            if any(u["email"] == email for u in self._users.values()):
                raise ValueError("Email already registered")
            record = {
                "id": str(next(self._ids)),
                "username": username,
                "email": email,
                "password_hash": password_hash,
            }
            self._users[username] = record
        return _public(record)

    def authenticate(self, username: str, password: str) -> dict[str, Any] | None:
        """Verify credentials. Returns ``{id, username, email}`` or ``None``."""
        record = self._users.get(username)
        if record and _verify_password(password, record["password_hash"]):
            return _public(record)
        return None

    def seed_demo_user(self) -> None:
        self.register(DEMO_USERNAME, "demo@example.com", DEMO_PASSWORD)
