"""Progress reporting for a crawl run."""

import logging
import threading
import time

from smbwatch.crawler.metrics import CounterSnapshot, CrawlCounters
from smbwatch.crawler.orchestrator import RunSummary

logger = logging.getLogger(__name__)


class StatsReporter:
    """Logs the crawl counters at a fixed interval from a background thread."""

    def __init__(self, counters: CrawlCounters, interval: float = 5.0):
        self.counters = counters
        self.interval = interval
        self.start_time = time.time()
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        if self._thread is not None or self.interval <= 0:
            return
        self._thread = threading.Thread(target=self._run, name="smbwatch-stats", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stopped.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def report(self) -> None:
        stats = self.counters.snapshot()
        logger.info(
            "Statistics: %d servers, %d shares, %d folders, %d files (%s)",
            stats.servers,
            stats.shares,
            stats.folders,
            stats.files,
            format_duration(time.time() - self.start_time),
        )

    def _run(self) -> None:
        while not self._stopped.wait(self.interval):
            self.report()


def format_summary(stats: CounterSnapshot, summary: RunSummary, elapsed_seconds: float) -> str:
    lines = [
        f"Crawl complete: {len(summary.finished):,} of {summary.total:,} servers "
        f"finished ({format_duration(elapsed_seconds)})",
        f"  Servers stopped: {len(summary.stopped):,}",
        f"  Shares indexed: {stats.shares:,}",
        f"  Folders visited: {stats.folders:,}",
        f"  Files found: {stats.files:,}",
    ]
    if summary.not_started:
        lines.append(f"  Servers not started: {len(summary.not_started):,}")
    return "\n".join(lines)


def format_duration(seconds: float) -> str:
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)

    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
