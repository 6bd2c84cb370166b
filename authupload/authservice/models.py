from __future__ import annotations
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from .contracts import AuthErrorCodes, UserRecord, UserRepoPort
from .errors import make_conflict_error

UTC = timezone.utc


class InMemoryUserRepo(UserRepoPort):
    """
    Test/dev repo. Keys by email and id; email uniqueness enforced here
    the same way the SQL store enforces it with a unique index.
    """
    def __init__(self):
        self._lock = threading.RLock()
        self._users_by_email: Dict[str, UserRecord] = {}
        self._users_by_id: Dict[str, UserRecord] = {}

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            return self._users_by_email.get(email)

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        with self._lock:
            return self._users_by_id.get(user_id)

    def create(self, *, email: str, password_hash: str, name: str, timezone: str) -> UserRecord:
        with self._lock:
            if email in self._users_by_email:
                raise make_conflict_error(AuthErrorCodes.EMAIL_TAKEN, "Email already registered")
            rec = UserRecord(
                id=str(uuid.uuid4()),
                email=email,
                password_hash=password_hash,
                name=name,
                timezone=timezone,
                created_at=datetime.now(UTC),
            )
            self._users_by_email[email] = rec
            self._users_by_id[rec.id] = rec
            return rec

    def delete(self, user_id: str) -> None:
        with self._lock:
            rec = self._users_by_id.pop(user_id, None)
            if rec:
                self._users_by_email.pop(rec.email, None)
