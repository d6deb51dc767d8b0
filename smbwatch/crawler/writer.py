"""Single-consumer pipeline persisting file records."""

import logging
import queue
import threading
from typing import Self

from smbwatch.database import CrawlStore, FileRecord

logger = logging.getLogger(__name__)

_STOP = object()


class WriterClosedError(Exception):
    """Raised when a record is submitted after the writer was closed."""


class ResultWriter:
    """Funnels records from many crawl threads into one writer thread.

    The queue is bounded, so ``submit`` blocks while the writer is busy and
    producers slow down to the store's pace. Records from one producer are
    written in submission order.
    """

    def __init__(self, store: CrawlStore, queue_size: int = 1, batch_size: int = 100):
        self.store = store
        self.batch_size = max(1, batch_size)
        self.written = 0
        self.dropped = 0
        self._queue: queue.Queue = queue.Queue(maxsize=max(1, queue_size))
        self._lock = threading.Lock()
        self._closed = False
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            self._thread = threading.Thread(target=self._run, name="smbwatch-writer", daemon=True)
            self._thread.start()

    def submit(self, record: FileRecord) -> None:
        # held across the put so no record can land behind the stop sentinel
        with self._lock:
            if self._closed:
                raise WriterClosedError("Result writer is closed")
            self._queue.put(record)

    def close(self) -> None:
        """Stop accepting records and wait until everything queued is written."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            thread = self._thread

        if thread is None:
            return
        self._queue.put(_STOP)
        thread.join()

    def __enter__(self) -> Self:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _run(self) -> None:
        stopping = False
        while not stopping:
            item = self._queue.get()
            if item is _STOP:
                break

            batch = [item]
            while len(batch) < self.batch_size:
                try:
                    item = self._queue.get_nowait()
                except queue.Empty:
                    break
                if item is _STOP:
                    stopping = True
                    break
                batch.append(item)

            self._persist(batch)

        logger.debug("Result writer stopped (%d written, %d dropped)", self.written, self.dropped)

    def _persist(self, batch: list[FileRecord]) -> None:
        try:
            self.store.insert_files(batch)
            self.written += len(batch)
            return
        except Exception as e:
            logger.warning("Batch insert of %d records failed, retrying one by one: %s", len(batch), e)

        for record in batch:
            try:
                self.store.insert_file(record)
                self.written += 1
            except Exception as e:
                self.dropped += 1
                logger.error(
                    "Unable to save %s\\%s%s/%s: %s",
                    record.server,
                    record.share,
                    record.folder,
                    record.name,
                    e,
                )
