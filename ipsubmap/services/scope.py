from __future__ import annotations

import ipaddress
from enum import Enum

IPAddress = ipaddress.IPv4Address | ipaddress.IPv6Address

_PRIVATE_NETWORKS = (
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("fc00::/7"),
)


class Scope(str, Enum):
    LOOPBACK = "loopback"
    PRIVATE = "private"
    PUBLIC = "public"


def normalize_address(value: str | IPAddress) -> IPAddress:
    """Parse an address, folding IPv4-mapped IPv6 (``::ffff:a.b.c.d``) to IPv4."""
    ip = ipaddress.ip_address(value) if isinstance(value, str) else value
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def is_private(ip: IPAddress) -> bool:
    # ipaddress.is_private also covers link-local, documentation and reserved
    # blocks; only RFC1918 and unique-local count here.
    return any(ip.version == net.version and ip in net for net in _PRIVATE_NETWORKS)


def classify(ip: IPAddress) -> Scope:
    ip = normalize_address(ip)
    if ip.is_loopback:
        return Scope.LOOPBACK
    if is_private(ip):
        return Scope.PRIVATE
    return Scope.PUBLIC
