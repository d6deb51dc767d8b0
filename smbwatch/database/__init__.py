"""Database module for smbwatch."""

from .connection import Database
from .models import FileRecord, ShareRecord, ShareState
from .schema import create_schema
from .store import CrawlStore

__all__ = [
    "Database",
    "CrawlStore",
    "create_schema",
    "FileRecord",
    "ShareRecord",
    "ShareState",
]
