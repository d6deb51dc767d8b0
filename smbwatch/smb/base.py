"""Protocol client interfaces used by the crawler."""

from dataclasses import dataclass
from typing import Protocol


class SmbError(Exception):
    """Base class for protocol client failures."""


class ConnectError(SmbError):
    """Raised when a session cannot be established or authenticated."""


class MountError(SmbError):
    """Raised when a share cannot be mounted."""


class FolderReadError(SmbError):
    """Raised when a folder cannot be listed."""


@dataclass(frozen=True)
class DirEntry:
    name: str
    is_directory: bool
    size: int
    modified_at: float | None
    mode: int


class MountedShare(Protocol):
    def read_directory(self, folder: str) -> list[DirEntry]:
        """List a share-relative folder ("" is the root, "/a/b" below it)."""
        ...

    def unmount(self) -> None: ...


class Session(Protocol):
    def list_shares(self) -> list[str]: ...

    def mount(self, share: str) -> MountedShare: ...

    def disconnect(self) -> None: ...


class Connector(Protocol):
    def connect(self, address: str, timeout: float) -> Session: ...
