"""Server discovery via an LDAP directory."""

import logging
import ssl

from ldap3 import NONE, SUBTREE, Connection, Server, Tls
from ldap3.core.exceptions import LDAPException

logger = logging.getLogger(__name__)

DEFAULT_FILTER = "(OperatingSystem=*server*)"
PAGE_SIZE = 50
HOSTNAME_ATTRIBUTE = "dNSHostName"


class DiscoveryError(Exception):
    """Raised when the server list cannot be retrieved."""


def base_dn_from_dn(bind_dn: str) -> str:
    """Derive the search base from the bind DN's first DC component onwards."""
    _, sep, rest = bind_dn.partition("DC")
    if not sep:
        raise DiscoveryError(f"invalid DN, could not extract base DN: {bind_dn}")
    return f"DC{rest}"


def discover_servers(
    url: str,
    bind_dn: str,
    password: str,
    base_dn: str,
    search_filter: str = DEFAULT_FILTER,
) -> list[str]:
    """Return the host names of every computer object matching the filter."""
    tls = Tls(validate=ssl.CERT_NONE)
    server = Server(url, use_ssl=url.lower().startswith("ldaps://"), tls=tls, get_info=NONE)

    try:
        conn = Connection(server, user=bind_dn, password=password, auto_bind=True)
    except LDAPException as e:
        raise DiscoveryError(f"unable to bind to {url}: {e}") from e

    try:
        entries = conn.extend.standard.paged_search(
            search_base=base_dn,
            search_filter=search_filter,
            search_scope=SUBTREE,
            attributes=[HOSTNAME_ATTRIBUTE],
            paged_size=PAGE_SIZE,
            generator=True,
        )
        servers = []
        for entry in entries:
            if entry.get("type") != "searchResEntry":
                continue
            hostname = _first_value(entry.get("attributes", {}).get(HOSTNAME_ATTRIBUTE))
            if not hostname:
                logger.debug("Skipping entry without host name: %s", entry.get("dn"))
                continue
            servers.append(hostname)
    except LDAPException as e:
        raise DiscoveryError(f"search below {base_dn} failed: {e}") from e
    finally:
        conn.unbind()

    logger.info("Retrieved %d servers from LDAP", len(servers))
    return servers


def _first_value(value) -> str:
    if isinstance(value, list):
        return value[0] if value else ""
    return value or ""
