"""Per-share scan state for resumable runs."""

from smbwatch.database import CrawlStore, ShareState

TERMINAL_STATES = (ShareState.FINISHED, ShareState.FAILED)


class ShareStateTracker:
    """Tracks which shares have been attempted.

    Any recorded row counts as attempted, so failed shares are not retried
    until an operator deletes their rows.
    """

    def __init__(self, store: CrawlStore):
        self.store = store

    def is_scanned(self, server: str, share: str) -> bool:
        return self.store.share_exists(server, share)

    def record_started(self, server: str, share: str) -> None:
        self.store.insert_share_started(server, share)

    def record_outcome(self, server: str, share: str, state: ShareState) -> None:
        if state not in TERMINAL_STATES:
            raise ValueError(f"Not a terminal share state: {state}")
        self.store.update_share_state(server, share, state)
