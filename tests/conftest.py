"""Shared fixtures: a temporary database and an in-memory SMB network."""

# pylint: disable=redefined-outer-name

import threading
import time
from pathlib import Path

import pytest

from smbwatch.database import CrawlStore, Database
from smbwatch.smb.base import ConnectError, DirEntry, FolderReadError, MountError, SmbError

MODIFIED_AT = 1_700_000_000.0


class FakeShare:
    """A share backed by a nested dict: dict values are folders, ints are file sizes."""

    def __init__(self, tree: dict, failing_folders: set[str] | None = None):
        self.tree = tree
        self.failing_folders = failing_folders or set()
        self.unmounted = False
        self.reads: list[str] = []

    def read_directory(self, folder: str) -> list[DirEntry]:
        self.reads.append(folder)
        if folder in self.failing_folders:
            raise FolderReadError(f"could not open folder {folder}")

        node = self.tree
        for part in folder.split("/"):
            if not part:
                continue
            node = node[part]

        return [
            DirEntry(
                name=name,
                is_directory=isinstance(value, dict),
                size=0 if isinstance(value, dict) else value,
                modified_at=MODIFIED_AT,
                mode=0x10 if isinstance(value, dict) else 0x20,
            )
            for name, value in node.items()
        ]

    def unmount(self) -> None:
        self.unmounted = True


class FakeSession:
    def __init__(
        self,
        connector: "FakeConnector",
        address: str,
        shares: dict[str, FakeShare],
        unmountable: set[str],
        list_error: bool,
    ):
        self.connector = connector
        self.address = address
        self.shares = shares
        self.unmountable = unmountable
        self.list_error = list_error
        self.mounted: list[str] = []
        self.disconnected = False

    def list_shares(self) -> list[str]:
        if self.connector.list_delay:
            time.sleep(self.connector.list_delay)
        if self.list_error:
            raise SmbError("unable to list shares")
        return list(self.shares)

    def mount(self, share: str) -> FakeShare:
        self.mounted.append(share)
        if share in self.unmountable:
            raise MountError(f"could not mount {share}")
        return self.shares[share]

    def disconnect(self) -> None:
        self.disconnected = True
        self.connector.release()


class FakeConnector:
    """Hands out FakeSessions and records how many are open at once."""

    def __init__(self, list_delay: float = 0.0):
        self.list_delay = list_delay
        self.servers: dict[str, dict] = {}
        self.sessions: dict[str, FakeSession] = {}
        self.connects: list[tuple[str, float]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def add_server(
        self,
        address: str,
        shares: dict[str, FakeShare] | None = None,
        unreachable: bool = False,
        unmountable: set[str] | None = None,
        list_error: bool = False,
    ) -> None:
        self.servers[address] = {
            "shares": shares or {},
            "unreachable": unreachable,
            "unmountable": unmountable or set(),
            "list_error": list_error,
        }

    def connect(self, address: str, timeout: float) -> FakeSession:
        with self._lock:
            self.connects.append((address, timeout))
        server = self.servers.get(address)
        if server is None or server["unreachable"]:
            raise ConnectError(f"unable to connect to {address}")

        session = FakeSession(
            self,
            address,
            server["shares"],
            server["unmountable"],
            server["list_error"],
        )
        with self._lock:
            self.sessions[address] = session
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        return session

    def release(self) -> None:
        with self._lock:
            self.active -= 1


@pytest.fixture
def db(tmp_path: Path):
    with Database(tmp_path / "test.db") as database:
        yield database


@pytest.fixture
def store(db: Database) -> CrawlStore:
    return CrawlStore(db)


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def make_share():
    return FakeShare


@pytest.fixture
def make_connector():
    return FakeConnector
