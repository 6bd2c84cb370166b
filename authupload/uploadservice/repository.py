from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ..errors import ConflictError, NotFoundError
from .contracts import FileRecord, FileRepoPort, NewFileRecord


class InMemoryFileRepo(FileRepoPort):
    """
    Process-local file record store.
    Not shared across processes; adequate for tests and local development.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._files: Dict[str, FileRecord] = {}
        self._seq: Dict[str, int] = {}
        self._next = 0

    def _now(self) -> datetime:
        return datetime.now(timezone.utc)

    def create(self, data: NewFileRecord) -> FileRecord:
        with self._lock:
            if any(f.key == data.key for f in self._files.values()):
                raise ConflictError("Unique constraint violation on field: key")
            ts = self._now()
            rec = FileRecord(id=str(uuid.uuid4()), created_at=ts, updated_at=ts, **data.model_dump())
            self._files[rec.id] = rec
            # insertion order breaks ties between equal timestamps
            self._next += 1
            self._seq[rec.id] = self._next
            return rec

    def get_by_id(self, file_id: str) -> Optional[FileRecord]:
        with self._lock:
            return self._files.get(file_id)

    def get_by_key(self, key: str) -> Optional[FileRecord]:
        with self._lock:
            return next((f for f in self._files.values() if f.key == key), None)

    def _filtered(self, uploaded_by: Optional[str]) -> List[FileRecord]:
        return [f for f in self._files.values() if uploaded_by is None or f.uploaded_by == uploaded_by]

    def list(self, *, offset: int, limit: int, uploaded_by: Optional[str] = None) -> List[FileRecord]:
        with self._lock:
            rows = sorted(
                self._filtered(uploaded_by),
                key=lambda f: (f.created_at, self._seq[f.id]),
                reverse=True,
            )
            return rows[offset: offset + limit]

    def count(self, *, uploaded_by: Optional[str] = None) -> int:
        with self._lock:
            return len(self._filtered(uploaded_by))

    def delete(self, file_id: str) -> None:
        with self._lock:
            if self._files.pop(file_id, None) is None:
                raise NotFoundError("Record not found")
            self._seq.pop(file_id, None)
