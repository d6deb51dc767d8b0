"""Crawl counters shared by all workers."""

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class CounterSnapshot:
    servers: int = 0
    shares: int = 0
    folders: int = 0
    files: int = 0


class CrawlCounters:
    """Monotonic counters incremented concurrently by crawl threads."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._servers = 0
        self._shares = 0
        self._folders = 0
        self._files = 0

    def add_server(self) -> None:
        with self._lock:
            self._servers += 1

    def add_share(self) -> None:
        with self._lock:
            self._shares += 1

    def add_folder(self) -> None:
        with self._lock:
            self._folders += 1

    def add_file(self) -> None:
        with self._lock:
            self._files += 1

    def snapshot(self) -> CounterSnapshot:
        with self._lock:
            return CounterSnapshot(
                servers=self._servers,
                shares=self._shares,
                folders=self._folders,
                files=self._files,
            )
