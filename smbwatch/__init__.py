"""smbwatch - An inventory crawler for SMB file shares."""

__version__ = "0.1.0"

from smbwatch.crawler import crawl_targets
from smbwatch.database import Database

__all__ = ["Database", "crawl_targets"]
