"""SMB protocol client."""

from .base import (
    ConnectError,
    Connector,
    DirEntry,
    FolderReadError,
    MountedShare,
    MountError,
    Session,
    SmbError,
)
from .client import SmbConnector

__all__ = [
    "Connector",
    "Session",
    "MountedShare",
    "DirEntry",
    "SmbConnector",
    "SmbError",
    "ConnectError",
    "MountError",
    "FolderReadError",
]
