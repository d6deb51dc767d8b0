"""Data models for the database."""

from dataclasses import dataclass
from enum import Enum


class ShareState(Enum):
    """Scan state of a share."""

    STARTED = "started"
    FINISHED = "finished"
    FAILED = "failed"


@dataclass(frozen=True)
class FileRecord:
    """A file observed on a share."""

    server: str
    share: str
    name: str
    folder: str
    extension: str
    size: int
    modified_at: float | None
    mode: int


@dataclass
class ShareRecord:
    """Represents a share row."""

    server: str
    share: str
    state: ShareState
    created_at: int
    updated_at: int | None
