from __future__ import annotations

from typing import BinaryIO

from .errors import WriteError
from .scope import Scope


class AddressReport:
    """IP -> hostnames accumulated for one scope.

    A report built without a sink is disabled: it accepts appends and drops
    them, and ``write()`` does nothing.
    """

    def __init__(self, scope: Scope, out: BinaryIO | None = None):
        self.scope = scope
        self.out = out
        self.enabled = out is not None
        self.hosts_by_ip: dict[str, list[str]] = {}

    def append(self, ip: str, hostname: str) -> None:
        if not self.enabled:
            return
        # Duplicate (ip, hostname) pairs are kept as given.
        self.hosts_by_ip.setdefault(ip, []).append(hostname)

    def __len__(self) -> int:
        return len(self.hosts_by_ip)

    def render_lines(self) -> list[str]:
        return [
            f"{ip} {','.join(self.hosts_by_ip[ip])}\n"
            for ip in sorted(self.hosts_by_ip)
        ]

    def write(self) -> None:
        if not self.enabled:
            return
        try:
            for line in self.render_lines():
                self.out.write(line.encode("utf-8"))
        except (OSError, ValueError) as e:
            raise WriteError(self.scope.value, e) from e
