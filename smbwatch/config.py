"""Configuration module for smbwatch."""

from dataclasses import dataclass, field
from pathlib import Path

from smbwatch.discovery import DEFAULT_FILTER


def parse_list(value: str | None) -> list[str]:
    """Split a comma separated option value, dropping empty items."""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class CrawlOptions:
    servers: list[str] = field(default_factory=list)
    user: str = ""
    password: str = ""
    domain: str = ""
    max_depth: int = 3
    workers: int = 8
    timeout: int = 5
    database_path: Path = field(default_factory=lambda: Path("smbwatch.db"))
    exclude_shares: list[str] = field(default_factory=list)
    exclude_extensions: list[str] = field(default_factory=list)
    ldap_server: str = ""
    ldap_dn: str = ""
    ldap_filter: str = DEFAULT_FILTER
    stats_interval: float = 5.0
    writer_queue_size: int = 1
    writer_batch_size: int = 100
