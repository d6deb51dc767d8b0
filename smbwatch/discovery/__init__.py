"""Server discovery."""

from .ldap import DEFAULT_FILTER, DiscoveryError, base_dn_from_dn, discover_servers

__all__ = ["discover_servers", "base_dn_from_dn", "DiscoveryError", "DEFAULT_FILTER"]
