from __future__ import annotations

import ipaddress
import logging
from typing import BinaryIO, Iterable

from ..plugins.dns import Lookup, lookup_system
from .errors import CombinedError, InputReadError, ResolutionError, WriteError
from .report import AddressReport
from .scope import Scope, classify, normalize_address

log = logging.getLogger(__name__)


def iter_hostnames(lines: Iterable[str]) -> Iterable[str]:
    """Yield one hostname per non-empty line, dropping only the line ending (LF, then one CR)."""
    it = iter(lines)
    while True:
        try:
            line = next(it)
        except StopIteration:
            return
        except (OSError, UnicodeDecodeError) as e:
            raise InputReadError(e) from e
        line = line.removesuffix("\n").removesuffix("\r")
        if line:
            yield line


class IPSubMap:
    """Resolves hostnames and buckets every address into a per-scope report."""

    def __init__(
        self,
        *,
        ipv4: bool = True,
        ipv6: bool = True,
        private: BinaryIO | None = None,
        public: BinaryIO | None = None,
        loopback: BinaryIO | None = None,
        lookup: Lookup = lookup_system,
    ):
        self.ipv4 = ipv4
        self.ipv6 = ipv6
        self.lookup = lookup
        self.reports: dict[Scope, AddressReport] = {
            Scope.PRIVATE: AddressReport(Scope.PRIVATE, private),
            Scope.PUBLIC: AddressReport(Scope.PUBLIC, public),
            Scope.LOOPBACK: AddressReport(Scope.LOOPBACK, loopback),
        }
        self.processed = 0

    def report(self, scope: Scope) -> AddressReport:
        return self.reports[scope]

    def _accepts(self, ip: ipaddress.IPv4Address | ipaddress.IPv6Address) -> bool:
        if ip.version == 4:
            return self.ipv4
        return self.ipv6

    def resolve(self, hostname: str) -> ResolutionError | None:
        try:
            ips = self.lookup(hostname)
        except ResolutionError as e:
            return e

        for raw in ips:
            ip = normalize_address(raw)
            if not self._accepts(ip):
                continue
            self.reports[classify(ip)].append(str(ip), hostname)
        return None

    def enumerate(self, lines: Iterable[str]) -> CombinedError:
        """Resolve every hostname in ``lines``; lookup failures are collected.

        Raises InputReadError if the stream itself fails. Whatever was
        resolved before that point stays in the reports.
        """
        errs: list[ResolutionError] = []
        for hostname in iter_hostnames(lines):
            self.processed += 1
            err = self.resolve(hostname)
            if err is not None:
                log.debug("%s", err)
                errs.append(err)
        return CombinedError(errs)

    def write(self) -> CombinedError:
        errs: list[WriteError] = []
        for report in self.reports.values():
            try:
                report.write()
            except WriteError as e:
                errs.append(e)
        return CombinedError(errs)
