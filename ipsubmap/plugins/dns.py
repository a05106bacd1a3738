from __future__ import annotations

import socket
from typing import Callable

import dns.exception
import dns.resolver

from ..config import dns_lifetime, dns_nameservers
from ..services.errors import ConfigError, ResolutionError
from ..services.scope import IPAddress, normalize_address

Lookup = Callable[[str], list[IPAddress]]


def _unique(ips: list[IPAddress]) -> list[IPAddress]:
    seen: set[IPAddress] = set()
    out: list[IPAddress] = []
    for ip in ips:
        if ip not in seen:
            seen.add(ip)
            out.append(ip)
    return out


def lookup_system(hostname: str) -> list[IPAddress]:
    """Resolve through the OS resolver (hosts file, nsswitch, DNS)."""
    try:
        infos = socket.getaddrinfo(hostname, None, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except (OSError, UnicodeError) as e:
        raise ResolutionError(hostname, e) from e

    ips: list[IPAddress] = []
    for info in infos:
        # Scoped v6 addresses come back as "fe80::1%eth0".
        addr = str(info[4][0]).split("%", 1)[0]
        try:
            ips.append(normalize_address(addr))
        except ValueError:
            continue
    return _unique(ips)


def make_dns_lookup(
    lifetime: float | None = None, nameservers: list[str] | None = None
) -> Lookup:
    servers = dns_nameservers() if nameservers is None else nameservers
    # resolv.conf is only read when no nameservers are given.
    r = dns.resolver.Resolver(configure=not servers)
    r.lifetime = dns_lifetime() if lifetime is None else lifetime
    if servers:
        r.nameservers = servers

    def lookup(hostname: str) -> list[IPAddress]:
        ips: list[IPAddress] = []
        last_err: Exception | None = None
        for qtype in ("A", "AAAA"):
            try:
                ans = r.resolve(hostname, qtype)
            except dns.resolver.NXDOMAIN as e:
                raise ResolutionError(hostname, e) from e
            except dns.resolver.NoAnswer as e:
                last_err = e
                continue
            except dns.exception.DNSException as e:
                raise ResolutionError(hostname, e) from e
            ips.extend(normalize_address(str(x)) for x in ans)

        if not ips:
            raise ResolutionError(hostname, last_err or "no addresses found")
        return _unique(ips)

    return lookup


def get_lookup(backend: str) -> Lookup:
    if backend == "system":
        return lookup_system
    if backend == "dns":
        return make_dns_lookup()
    raise ConfigError(f"unknown resolver {backend!r}")
