import threading
from datetime import datetime, timezone
from typing import Dict, List

from werkzeug.security import check_password_hash, generate_password_hash

# Per-user history entries kept in memory
MAX_HISTORY = 50


class UserExistsError(Exception):
    pass


class InvalidCredentialsError(Exception):
    pass


class UserStore:
    """In-memory accounts. Owned by the app instance, lost on restart."""

    def __init__(self, max_history: int = MAX_HISTORY):
        self.max_history = max_history
        self._users: Dict[str, dict] = {}
        self._lock = threading.Lock()

    def register(self, username: str, password: str):
        with self._lock:
            if username in self._users:
                raise UserExistsError(username)
            self._users[username] = {
                "password_hash": generate_password_hash(password),
                "created_at": datetime.now(timezone.utc),
                "history": [],
            }

    def authenticate(self, username: str, password: str):
        user = self._users.get(username)
        if not user or not check_password_hash(user["password_hash"], password):
            raise InvalidCredentialsError(username)

    def exists(self, username: str) -> bool:
        return username in self._users

    def delete(self, username: str) -> bool:
        with self._lock:
            return self._users.pop(username, None) is not None

    def add_history(self, username: str, severity: str):
        """Record that advice was given; symptom text and advice are not stored."""
        with self._lock:
            user = self._users.get(username)
            if user is None:
                return
            user["history"].insert(0, {"timestamp": datetime.now(timezone.utc).isoformat(),
                                       "severity": severity})
            del user["history"][self.max_history:]

    def history(self, username: str) -> List[dict]:
        user = self._users.get(username)
        return list(user["history"]) if user else []

    def history_count(self, username: str) -> int:
        return len(self.history(username))
