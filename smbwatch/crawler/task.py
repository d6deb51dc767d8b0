"""Crawl of a single server."""

import logging
import sqlite3
import threading

from smbwatch.crawler.exclusion import ExclusionFilter
from smbwatch.crawler.metrics import CrawlCounters
from smbwatch.crawler.state import ShareStateTracker
from smbwatch.crawler.walker import ShareWalker, ShareWalkError
from smbwatch.crawler.writer import ResultWriter, WriterClosedError
from smbwatch.database import ShareState
from smbwatch.smb.base import Connector, MountedShare, Session, SmbError

logger = logging.getLogger(__name__)


class ServerCrawlError(Exception):
    """Raised when a server cannot be enumerated at all."""


class ServerCrawler:
    """Enumerates the shares of one server and walks each of them.

    Failures of a single share are logged and recorded against that share;
    only connect and share listing failures end the server's crawl.
    """

    def __init__(
        self,
        connector: Connector,
        tracker: ShareStateTracker,
        walker: ShareWalker,
        writer: ResultWriter,
        exclusion: ExclusionFilter,
        counters: CrawlCounters,
        timeout: float = 5,
        cancel: threading.Event | None = None,
    ):
        self.connector = connector
        self.tracker = tracker
        self.walker = walker
        self.writer = writer
        self.exclusion = exclusion
        self.counters = counters
        self.timeout = timeout
        self.cancel = cancel or threading.Event()

    def crawl(self, server: str) -> None:
        try:
            session = self.connector.connect(server, self.timeout)
        except SmbError as e:
            raise ServerCrawlError(f"unable to connect to {server}: {e}") from e

        try:
            try:
                shares = session.list_shares()
            except SmbError as e:
                raise ServerCrawlError(f"unable to list shares: {e}") from e

            for share in shares:
                if self.cancel.is_set():
                    logger.info("Crawl of %s interrupted before share %s", server, share)
                    break
                self._crawl_share(session, server, share)
        finally:
            session.disconnect()

    def _crawl_share(self, session: Session, server: str, share: str) -> None:
        if self.exclusion.should_skip_share(share):
            logger.debug("Skipping excluded share %s on %s", share, server)
            return

        try:
            if self.tracker.is_scanned(server, share):
                logger.info("Skipping share %s on %s, already indexed", share, server)
                return
            self.tracker.record_started(server, share)
        except sqlite3.IntegrityError:
            logger.info("Skipping share %s on %s, recorded by another run", share, server)
            return
        except sqlite3.Error as e:
            logger.error("Could not record share %s on %s: %s", share, server, e)
            self._record_outcome(server, share, ShareState.FAILED)
            return

        self.counters.add_share()
        logger.debug("Indexing share %s on %s", share, server)

        try:
            mounted = session.mount(share)
        except SmbError as e:
            logger.warning("Could not mount %s on %s: %s", share, server, e)
            self._record_outcome(server, share, ShareState.FAILED)
            return
        except Exception:
            logger.exception("Unexpected error mounting %s on %s", share, server)
            self._record_outcome(server, share, ShareState.FAILED)
            return

        try:
            for record in self.walker.walk(mounted, server, share):
                self.writer.submit(record)
        except (ShareWalkError, WriterClosedError) as e:
            logger.warning("Could not get files of %s on %s: %s", share, server, e)
            self._record_outcome(server, share, ShareState.FAILED)
            return
        except Exception:
            logger.exception("Unexpected error walking %s on %s", share, server)
            self._record_outcome(server, share, ShareState.FAILED)
            return
        finally:
            self._unmount(mounted, server, share)

        if self.cancel.is_set():
            logger.warning("Walk of %s on %s interrupted", share, server)
            self._record_outcome(server, share, ShareState.FAILED)
            return

        logger.info("Finished share %s on %s", share, server)
        self._record_outcome(server, share, ShareState.FINISHED)

    def _unmount(self, mounted: MountedShare, server: str, share: str) -> None:
        try:
            mounted.unmount()
        except Exception:
            logger.exception("Unexpected error unmounting %s on %s", share, server)

    def _record_outcome(self, server: str, share: str, state: ShareState) -> None:
        try:
            self.tracker.record_outcome(server, share, state)
        except sqlite3.Error as e:
            logger.error(
                "Could not mark share %s on %s as %s: %s", share, server, state.value, e
            )
