"""Bounded parallel crawl of many servers."""

import logging
import threading
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field

from smbwatch.crawler.metrics import CrawlCounters
from smbwatch.crawler.task import ServerCrawler, ServerCrawlError

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    """Outcome of a crawl run per server."""

    finished: list[str] = field(default_factory=list)
    stopped: list[str] = field(default_factory=list)
    not_started: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.finished) + len(self.stopped) + len(self.not_started)


def unique_targets(targets: Iterable[str]) -> list[str]:
    """Strip whitespace, drop empty entries and duplicates, keep order."""
    seen: set[str] = set()
    servers = []
    for target in targets:
        target = target.strip()
        if target and target not in seen:
            seen.add(target)
            servers.append(target)
    return servers


class Orchestrator:
    """Runs one ServerCrawler task per server, at most ``workers`` at a time."""

    def __init__(
        self,
        crawler: ServerCrawler,
        counters: CrawlCounters,
        workers: int = 8,
        cancel: threading.Event | None = None,
    ):
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.crawler = crawler
        self.counters = counters
        self.workers = workers
        self.cancel = cancel or threading.Event()
        self._summary_lock = threading.Lock()

    def run(self, targets: Iterable[str]) -> RunSummary:
        """Crawl every target and block until all of them are done."""
        summary = RunSummary()
        slots = threading.BoundedSemaphore(self.workers)

        with ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="smbwatch-worker"
        ) as executor:
            try:
                for server in unique_targets(targets):
                    slots.acquire()
                    if self.cancel.is_set():
                        slots.release()
                        summary.not_started.append(server)
                        continue
                    executor.submit(self._crawl_server, server, slots, summary)
            except KeyboardInterrupt:
                # running workers must see the flag before the pool joins them
                self.stop()
                raise

        logger.info(
            "Finished all enumerations (%d finished, %d stopped)",
            len(summary.finished),
            len(summary.stopped),
        )
        return summary

    def stop(self) -> None:
        """Dispatch no further servers and interrupt running crawls between shares."""
        self.cancel.set()

    def _crawl_server(
        self,
        server: str,
        slots: threading.BoundedSemaphore,
        summary: RunSummary,
    ) -> None:
        try:
            self.counters.add_server()
            logger.info("Starting enumeration of %s", server)
            try:
                self.crawler.crawl(server)
            except ServerCrawlError as e:
                logger.warning("Stopped enumeration of %s: %s", server, e)
                self._add_result(summary.stopped, server)
                return
            except Exception:
                logger.exception("Stopped enumeration of %s", server)
                self._add_result(summary.stopped, server)
                return

            logger.info("Finished enumeration of %s", server)
            self._add_result(summary.finished, server)
        finally:
            slots.release()

    def _add_result(self, results: list[str], server: str) -> None:
        with self._summary_lock:
            results.append(server)
