"""CLI interface for smbwatch."""

import logging
import sqlite3
import sys
from datetime import datetime
from pathlib import Path

import click

from smbwatch.config import CrawlOptions, parse_list
from smbwatch.crawler import crawl_targets
from smbwatch.crawler.progress import format_summary
from smbwatch.database import CrawlStore, Database, ShareState
from smbwatch.discovery import DEFAULT_FILTER, DiscoveryError, base_dn_from_dn, discover_servers
from smbwatch.smb import SmbConnector

logger = logging.getLogger(__name__)

DEFAULT_DATABASE = Path("smbwatch.db")


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


@cli.command()
@click.option(
    "--server",
    "servers",
    multiple=True,
    help="SMB server, repeat or separate multiple servers with commas",
)
@click.option("--user", default="", help="NTLM user")
@click.option("--pass", "password", default=None, help="NTLM password (prompted if omitted)")
@click.option("--domain", default="", help="NTLM domain")
@click.option(
    "--database",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_DATABASE,
    show_default=True,
    help="Path to database file",
)
@click.option("--maxdepth", "max_depth", type=click.IntRange(min=0), default=3, show_default=True,
              help="Max recursion depth when retrieving files")
@click.option("--worker", "workers", type=click.IntRange(min=1), default=8, show_default=True,
              help="Number of servers crawled in parallel")
@click.option("--timeout", type=click.IntRange(min=1), default=5, show_default=True,
              help="SMB server connect timeout in seconds")
@click.option("--exclude-shares", default="", help="Share names to exclude, e.g. ADMIN$,IPC$")
@click.option("--exclude-extensions", default="", help="Extensions to exclude, e.g. dll,exe")
@click.option("--ldap-server", default="", help="LDAP server URL to get the SMB server list from")
@click.option("--ldap-dn", default="", help="LDAP bind distinguished name")
@click.option("--ldap-filter", default=DEFAULT_FILTER, show_default=True,
              help="LDAP filter selecting computer objects")
@click.option("--stats-interval", type=float, default=5.0, show_default=True,
              help="Log statistics every N seconds (0 disables)")
def crawl(
    servers: tuple[str, ...],
    user: str,
    password: str | None,
    domain: str,
    database: Path,
    max_depth: int,
    workers: int,
    timeout: int,
    exclude_shares: str,
    exclude_extensions: str,
    ldap_server: str,
    ldap_dn: str,
    ldap_filter: str,
    stats_interval: float,
) -> None:
    """Enumerate every share of the given servers and index their files."""
    server_list = [s for value in servers for s in parse_list(value)]

    if not server_list and not ldap_dn:
        click.echo("Error: specify --server or --ldap-dn.", err=True)
        sys.exit(1)
    if ldap_dn and not ldap_server:
        click.echo("Error: --ldap-server is required with --ldap-dn.", err=True)
        sys.exit(1)

    if password is None:
        password = click.prompt("Enter password", hide_input=True, default="", show_default=False)

    options = CrawlOptions(
        servers=server_list,
        user=user,
        password=password,
        domain=domain,
        max_depth=max_depth,
        workers=workers,
        timeout=timeout,
        database_path=database,
        exclude_shares=parse_list(exclude_shares),
        exclude_extensions=parse_list(exclude_extensions),
        ldap_server=ldap_server,
        ldap_dn=ldap_dn,
        ldap_filter=ldap_filter,
        stats_interval=stats_interval,
    )

    try:
        targets = _collect_targets(options)
    except DiscoveryError as e:
        click.echo(f"Error: failed getting servers via LDAP: {e}", err=True)
        sys.exit(1)

    try:
        db = Database(options.database_path)
        db.connect()
    except (sqlite3.Error, OSError) as e:
        click.echo(f"Error: unable to open database {options.database_path}: {e}", err=True)
        sys.exit(1)

    connector = SmbConnector(options.user, options.password, options.domain)
    click.echo(f"Crawling {len(targets):,} servers with {options.workers} workers")

    try:
        with db:
            result = crawl_targets(options, connector, db, targets)
    except KeyboardInterrupt:
        click.echo("\nCrawl interrupted. Unfinished shares are marked failed.", err=True)
        sys.exit(130)

    click.echo()
    click.echo(format_summary(result.stats, result.summary, result.elapsed_seconds))
    if result.records_dropped:
        click.echo(f"  Records dropped: {result.records_dropped:,}")
    click.echo(f"Database: {options.database_path}")


def _collect_targets(options: CrawlOptions) -> list[str]:
    targets = list(options.servers)
    if not options.ldap_dn:
        return targets

    base_dn = base_dn_from_dn(options.ldap_dn)
    logger.info(
        "Querying LDAP %s (dn %s, base dn %s, filter %s)",
        options.ldap_server,
        options.ldap_dn,
        base_dn,
        options.ldap_filter,
    )
    servers = discover_servers(
        options.ldap_server,
        options.ldap_dn,
        options.password,
        base_dn,
        options.ldap_filter,
    )
    targets.extend(servers)
    return targets


@cli.command()
@click.option(
    "--database",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_DATABASE,
    help="Path to database file",
)
@click.option(
    "--state",
    type=click.Choice([state.value for state in ShareState]),
    default=None,
    help="Only list shares in this state",
)
def status(database: Path, state: str | None) -> None:
    """Show indexed shares and file totals."""
    if not database.exists():
        click.echo("No database found. Run 'smbwatch crawl' first.")
        return

    with Database(database) as db:
        store = CrawlStore(db)
        shares = store.list_shares(ShareState(state) if state else None)
        counts = store.share_state_counts()
        total_files = store.count_files()

    if not shares:
        click.echo("No shares found.")
    else:
        click.echo("\nShares:")
        click.echo("-" * 80)
        header = "Server".ljust(35) + "Share".ljust(20) + "State".ljust(10) + "Started".ljust(15)
        click.echo(header)
        click.echo("-" * 80)
        for share in shares:
            click.echo(
                f"{_truncate(share.server, 34):<35}"
                f"{_truncate(share.share, 19):<20}"
                f"{share.state.value:<10}"
                f"{_format_relative_time(share.created_at):<15}"
            )

    click.echo()
    click.echo(
        "Shares: "
        + ", ".join(f"{counts[s]:,} {s.value}" for s in ShareState)
    )
    click.echo(f"Files: {total_files:,}")


@cli.command("clear-failed")
@click.option(
    "--database",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_DATABASE,
    help="Path to database file",
)
def clear_failed(database: Path) -> None:
    """Forget failed shares so the next crawl retries them."""
    if not database.exists():
        click.echo("Error: No database found. Run 'smbwatch crawl' first.", err=True)
        sys.exit(1)

    with Database(database) as db:
        deleted = CrawlStore(db).delete_shares(ShareState.FAILED)

    click.echo(f"Cleared {deleted:,} failed shares.")


def _format_relative_time(unix_timestamp: int | None) -> str:
    if not unix_timestamp:
        return "unknown"

    now = datetime.now()
    then = datetime.fromtimestamp(unix_timestamp)
    delta = now - then

    if delta.days > 1:
        return f"{delta.days} days ago"
    if delta.days == 1:
        return "yesterday"
    if delta.seconds > 3600:
        hours = delta.seconds // 3600
        return f"{hours}h ago"
    if delta.seconds > 60:
        minutes = delta.seconds // 60
        return f"{minutes}m ago"
    return "just now"


def _truncate(text: str, max_len: int) -> str:
    if len(text) <= max_len:
        return text
    return "..." + text[-(max_len - 3) :]


def main() -> None:
    """Entry point for the CLI."""
    cli(standalone_mode=True)  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
