from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .services.errors import ConfigError

RESOLVER_BACKENDS = ("system", "dns")


def _env_str(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _parse_csv_env(name: str, default: str = "") -> list[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def default_resolver() -> str:
    return _env_str("IPSUBMAP_RESOLVER", "system").lower() or "system"


def default_log_level() -> str:
    level = _env_str("IPSUBMAP_LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        return "INFO"
    return level


def dns_lifetime() -> float:
    try:
        return float(_env_str("IPSUBMAP_DNS_LIFETIME", "5"))
    except ValueError:
        return 5.0


def dns_nameservers() -> list[str]:
    return _parse_csv_env("IPSUBMAP_DNS_NAMESERVERS")


@dataclass(frozen=True)
class Flags:
    input_file: str
    out_private: str = ""
    out_public: str = ""
    out_loopback: str = ""
    ipv4: bool = True
    ipv6: bool = True
    resolver: str = "system"

    def outputs(self) -> dict[str, str]:
        return {
            "private": self.out_private,
            "public": self.out_public,
            "loopback": self.out_loopback,
        }

    def validate(self) -> None:
        """Raise ConfigError when the run cannot start with these flags."""
        path = Path(self.input_file)
        if not path.exists():
            raise ConfigError(f"input file {self.input_file!r} does not exist")
        if path.is_dir():
            raise ConfigError("input file is a directory")

        if not any(self.outputs().values()):
            raise ConfigError("no output files specified")

        for out in self.outputs().values():
            if out and Path(out).exists():
                raise ConfigError(f"output file {out!r} already exists")

        if not self.ipv4 and not self.ipv6:
            raise ConfigError("no ip version specified")

        if self.resolver not in RESOLVER_BACKENDS:
            raise ConfigError(
                f"unknown resolver {self.resolver!r}, expected one of {', '.join(RESOLVER_BACKENDS)}"
            )
