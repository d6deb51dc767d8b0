"""Wiring of a complete crawl run."""

import logging
import threading
import time
from collections.abc import Iterable
from dataclasses import dataclass

from smbwatch.config import CrawlOptions
from smbwatch.crawler.exclusion import ExclusionFilter
from smbwatch.crawler.metrics import CounterSnapshot, CrawlCounters
from smbwatch.crawler.orchestrator import Orchestrator, RunSummary
from smbwatch.crawler.progress import StatsReporter
from smbwatch.crawler.state import ShareStateTracker
from smbwatch.crawler.task import ServerCrawler
from smbwatch.crawler.walker import ShareWalker
from smbwatch.crawler.writer import ResultWriter
from smbwatch.database import CrawlStore, Database
from smbwatch.smb.base import Connector

logger = logging.getLogger(__name__)


@dataclass
class CrawlResult:
    summary: RunSummary
    stats: CounterSnapshot
    records_written: int
    records_dropped: int
    elapsed_seconds: float


def crawl_targets(
    options: CrawlOptions,
    connector: Connector,
    db: Database,
    targets: Iterable[str],
    cancel: threading.Event | None = None,
) -> CrawlResult:
    """Crawl every target into the database and return the run's totals.

    The writer is always drained and closed before this returns, including
    when the run is interrupted.
    """
    start_time = time.time()
    cancel = cancel or threading.Event()

    exclusion = ExclusionFilter.from_lists(options.exclude_shares, options.exclude_extensions)
    counters = CrawlCounters()
    store = CrawlStore(db)
    writer = ResultWriter(
        store,
        queue_size=options.writer_queue_size,
        batch_size=options.writer_batch_size,
    )
    crawler = ServerCrawler(
        connector=connector,
        tracker=ShareStateTracker(store),
        walker=ShareWalker(exclusion, counters, max_depth=options.max_depth, cancel=cancel),
        writer=writer,
        exclusion=exclusion,
        counters=counters,
        timeout=options.timeout,
        cancel=cancel,
    )
    orchestrator = Orchestrator(crawler, counters, workers=options.workers, cancel=cancel)
    reporter = StatsReporter(counters, interval=options.stats_interval)

    logger.debug(
        "Max depth: %d, workers: %d, timeout: %ds, excluded shares: %s, excluded extensions: %s",
        options.max_depth,
        options.workers,
        options.timeout,
        sorted(exclusion.shares),
        sorted(exclusion.extensions),
    )

    writer.start()
    reporter.start()
    try:
        summary = orchestrator.run(targets)
    except KeyboardInterrupt:
        orchestrator.stop()
        raise
    finally:
        writer.close()
        reporter.stop()

    return CrawlResult(
        summary=summary,
        stats=counters.snapshot(),
        records_written=writer.written,
        records_dropped=writer.dropped,
        elapsed_seconds=time.time() - start_time,
    )
