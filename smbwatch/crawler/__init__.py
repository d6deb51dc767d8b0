"""Crawl engine: traversal, state tracking, concurrency and persistence."""

from .exclusion import ExclusionFilter
from .metrics import CounterSnapshot, CrawlCounters
from .orchestrator import Orchestrator, RunSummary
from .progress import StatsReporter
from .runner import CrawlResult, crawl_targets
from .state import ShareStateTracker
from .task import ServerCrawler, ServerCrawlError
from .walker import MaxDepthReached, ShareWalker, ShareWalkError, parse_extension
from .writer import ResultWriter, WriterClosedError

__all__ = [
    "ExclusionFilter",
    "CrawlCounters",
    "CounterSnapshot",
    "ShareStateTracker",
    "ShareWalker",
    "ShareWalkError",
    "MaxDepthReached",
    "parse_extension",
    "ResultWriter",
    "WriterClosedError",
    "ServerCrawler",
    "ServerCrawlError",
    "Orchestrator",
    "RunSummary",
    "StatsReporter",
    "CrawlResult",
    "crawl_targets",
]
