from .app import create_app, main
from .settings import AppSettings

__all__ = ["create_app", "main", "AppSettings"]
