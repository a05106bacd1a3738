from __future__ import annotations


class IPSubMapError(Exception):
    pass


class ConfigError(IPSubMapError):
    pass


class ResolutionError(IPSubMapError):
    def __init__(self, hostname: str, cause: BaseException | str):
        self.hostname = hostname
        self.cause = cause
        super().__init__(f"failed to resolve subdomain {hostname!r}: {cause}")


class InputReadError(IPSubMapError):
    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"failed to read input: {cause}")


class WriteError(IPSubMapError):
    def __init__(self, scope: str, cause: BaseException):
        self.scope = scope
        self.cause = cause
        super().__init__(f"failed to write {scope} ip subdomains: {cause}")


class CombinedError(IPSubMapError):
    """Ordered collection of non-fatal failures from one phase.

    Falsy when nothing failed, so callers can write ``if errs:``.
    """

    def __init__(self, errors: list[IPSubMapError] | None = None):
        self.errors: list[IPSubMapError] = list(errors or [])
        super().__init__("\n".join(str(e) for e in self.errors))

    def __bool__(self) -> bool:
        return bool(self.errors)

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)
