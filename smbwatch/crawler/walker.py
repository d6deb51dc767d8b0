"""Recursive traversal of a mounted share."""

import logging
import threading
from collections.abc import Iterator

from smbwatch.crawler.exclusion import ExclusionFilter
from smbwatch.crawler.metrics import CrawlCounters
from smbwatch.database.models import FileRecord
from smbwatch.smb.base import DirEntry, MountedShare, SmbError

logger = logging.getLogger(__name__)

SEPARATOR = "/"


class MaxDepthReached(Exception):
    """Raised when a folder lies deeper than the configured limit."""

    def __init__(self, folder: str, max_depth: int):
        super().__init__(f"max depth {max_depth} reached at {folder}")
        self.folder = folder
        self.max_depth = max_depth


class ShareWalkError(Exception):
    """Raised when the start folder of a walk cannot be read."""


def parse_extension(filename: str) -> str:
    """Return the lower-cased last extension of a filename, or ""."""
    dot_index = filename.rfind(".")
    if dot_index < 0:
        return ""
    return filename[dot_index + 1 :].lower()


def folder_depth(folder: str) -> int:
    return folder.count(SEPARATOR)


def join_folder(folder: str, name: str) -> str:
    return f"{folder}{SEPARATOR}{name}"


class ShareWalker:
    """Depth-first walk of a share, yielding one FileRecord per file.

    Folder paths are relative to the share root: the root is "" and a
    top-level folder is "/name", so a folder's depth is its separator count.
    """

    def __init__(
        self,
        exclusion: ExclusionFilter,
        counters: CrawlCounters,
        max_depth: int = 3,
        cancel: threading.Event | None = None,
    ):
        self.exclusion = exclusion
        self.counters = counters
        self.max_depth = max_depth
        self.cancel = cancel

    def walk(
        self,
        share: MountedShare,
        server: str,
        share_name: str,
        start_folder: str = "",
    ) -> Iterator[FileRecord]:
        try:
            yield from self._walk_folder(share, server, share_name, start_folder)
        except MaxDepthReached as e:
            logger.debug("Not walking %s\\%s: %s", server, share_name, e)
        except SmbError as e:
            raise ShareWalkError(str(e)) from e

    def _walk_folder(
        self,
        share: MountedShare,
        server: str,
        share_name: str,
        folder: str,
    ) -> Iterator[FileRecord]:
        if folder_depth(folder) > self.max_depth:
            raise MaxDepthReached(folder, self.max_depth)

        entries = share.read_directory(folder)

        for entry in entries:
            if self._cancelled():
                logger.debug("Walk of %s\\%s cancelled at %s", server, share_name, folder)
                return

            if entry.is_directory:
                yield from self._walk_subfolder(share, server, share_name, folder, entry)
                continue

            extension = parse_extension(entry.name)
            if self.exclusion.should_skip_file(extension):
                continue

            self.counters.add_file()
            yield FileRecord(
                server=server,
                share=share_name,
                name=entry.name,
                folder=folder,
                extension=extension,
                size=entry.size,
                modified_at=entry.modified_at,
                mode=entry.mode,
            )

    def _walk_subfolder(
        self,
        share: MountedShare,
        server: str,
        share_name: str,
        folder: str,
        entry: DirEntry,
    ) -> Iterator[FileRecord]:
        self.counters.add_folder()
        path = join_folder(folder, entry.name)
        logger.debug("Folder: %s\\%s%s", server, share_name, path)

        try:
            yield from self._walk_folder(share, server, share_name, path)
        except (MaxDepthReached, SmbError) as e:
            logger.debug("Could not read folder %s on %s\\%s: %s", path, server, share_name, e)

    def _cancelled(self) -> bool:
        return self.cancel is not None and self.cancel.is_set()
