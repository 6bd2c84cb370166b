import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, BigInteger, Column, DateTime, Index, Numeric, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UserRow(Base):
    __tablename__ = "users"
    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(100), nullable=False)
    timezone = Column(String(64), nullable=False, default="America/Sao_Paulo")
    weight_kg = Column(Numeric(5, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)


class FileRow(Base):
    __tablename__ = "files"
    id = Column(String(36), primary_key=True, default=_uuid)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    mime_type = Column(String(127), nullable=False)
    size = Column(BigInteger, nullable=False)
    key = Column(String(1024), unique=True, index=True, nullable=False)
    url = Column(String(2048), nullable=False)
    uploaded_by = Column(String(64), nullable=True, index=True)
    # "metadata" is reserved on declarative classes
    metadata_ = Column("metadata", JSON, nullable=True, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_files_created_at", "created_at"),
    )
