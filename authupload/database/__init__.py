from .config import DatabaseSettings
from .errors import translate_db_error
from .models import Base, FileRow, UserRow
from .repositories import SqlFileRepo, SqlUserRepo
from .session import Database, make_engine

__all__ = [
    "DatabaseSettings",
    "translate_db_error",
    "Base",
    "FileRow",
    "UserRow",
    "SqlFileRepo",
    "SqlUserRepo",
    "Database",
    "make_engine",
]
