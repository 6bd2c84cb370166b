from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from ..authservice.contracts import UserRecord, UserRepoPort
from ..errors import NotFoundError
from ..uploadservice.contracts import FileRecord, FileRepoPort, NewFileRecord
from .errors import translate_db_error
from .models import FileRow, UserRow
from .session import Database


def _aware(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone=True columns
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def _user(row: UserRow) -> UserRecord:
    return UserRecord(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        name=row.name,
        timezone=row.timezone,
        weight_kg=row.weight_kg,
        created_at=_aware(row.created_at),
    )


def _file(row: FileRow) -> FileRecord:
    return FileRecord(
        id=row.id,
        filename=row.filename,
        original_name=row.original_name,
        mime_type=row.mime_type,
        size=row.size,
        key=row.key,
        url=row.url,
        uploaded_by=row.uploaded_by,
        metadata=row.metadata_ if isinstance(row.metadata_, dict) else None,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


class SqlUserRepo(UserRepoPort):
    def __init__(self, db: Database):
        self.db = db

    def get_by_email(self, email: str) -> Optional[UserRecord]:
        with self.db.session_scope() as s:
            row = s.scalars(select(UserRow).where(UserRow.email == email)).first()
            return _user(row) if row else None

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        with self.db.session_scope() as s:
            row = s.get(UserRow, user_id)
            return _user(row) if row else None

    def create(self, *, email: str, password_hash: str, name: str, timezone: str) -> UserRecord:
        try:
            with self.db.session_scope() as s:
                row = UserRow(email=email, password_hash=password_hash, name=name, timezone=timezone)
                s.add(row)
                s.flush()
                return _user(row)
        except SQLAlchemyError as e:
            raise translate_db_error(e) from e


class SqlFileRepo(FileRepoPort):
    def __init__(self, db: Database):
        self.db = db

    def create(self, data: NewFileRecord) -> FileRecord:
        try:
            with self.db.session_scope() as s:
                row = FileRow(
                    filename=data.filename,
                    original_name=data.original_name,
                    mime_type=data.mime_type,
                    size=data.size,
                    key=data.key,
                    url=data.url,
                    uploaded_by=data.uploaded_by,
                    metadata_=dict(data.metadata),
                )
                s.add(row)
                s.flush()
                return _file(row)
        except SQLAlchemyError as e:
            raise translate_db_error(e) from e

    def get_by_id(self, file_id: str) -> Optional[FileRecord]:
        with self.db.session_scope() as s:
            row = s.get(FileRow, file_id)
            return _file(row) if row else None

    def get_by_key(self, key: str) -> Optional[FileRecord]:
        with self.db.session_scope() as s:
            row = s.scalars(select(FileRow).where(FileRow.key == key)).first()
            return _file(row) if row else None

    def list(self, *, offset: int, limit: int, uploaded_by: Optional[str] = None) -> List[FileRecord]:
        stmt = select(FileRow).order_by(FileRow.created_at.desc(), FileRow.id.desc()).offset(offset).limit(limit)
        if uploaded_by is not None:
            stmt = stmt.where(FileRow.uploaded_by == uploaded_by)
        with self.db.session_scope() as s:
            return [_file(r) for r in s.scalars(stmt).all()]

    def count(self, *, uploaded_by: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(FileRow)
        if uploaded_by is not None:
            stmt = stmt.where(FileRow.uploaded_by == uploaded_by)
        with self.db.session_scope() as s:
            return int(s.scalar(stmt) or 0)

    def delete(self, file_id: str) -> None:
        with self.db.session_scope() as s:
            row = s.get(FileRow, file_id)
            if row is None:
                raise NotFoundError("Record not found")
            s.delete(row)
