from __future__ import annotations

import pytest

from ipsubmap.services.errors import ResolutionError


class FakeLookup:
    def __init__(self, table: dict[str, list[str]]):
        self.table = table
        self.calls: list[str] = []

    def __call__(self, hostname: str) -> list[str]:
        self.calls.append(hostname)
        if hostname not in self.table:
            raise ResolutionError(hostname, "no such host")
        return list(self.table[hostname])


@pytest.fixture()
def fake_lookup() -> FakeLookup:
    return FakeLookup(
        {
            "good.example": ["93.184.216.34", "2606:2800:220:1::1"],
            "good2.example": ["93.184.216.34"],
            "intranet.example": ["10.0.0.2", "fd00::5"],
            "local.example": ["127.0.0.1", "::1"],
            "dns.example": ["2.2.2.2", "1.1.1.1"],
        }
    )
