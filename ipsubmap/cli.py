from __future__ import annotations

import logging
from contextlib import ExitStack

import dns.exception
import typer
from rich import print
from rich.logging import RichHandler

from .config import Flags, default_log_level, default_resolver
from .plugins.dns import get_lookup
from .services.errors import ConfigError, InputReadError
from .services.mapper_service import IPSubMap
from .services.scope import Scope

log = logging.getLogger("ipsubmap")

app = typer.Typer(no_args_is_help=True, add_completion=False)


def setup_logging(verbose: bool = False) -> None:
    level = "DEBUG" if verbose else default_log_level()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.command()
def run(
    file: str = typer.Option(..., "--file", "-f", help="Input file, one hostname per line"),
    out_private: str = typer.Option("", "--out-private", help="Output file for private ip subdomains"),
    out_public: str = typer.Option("", "--out-public", help="Output file for public ip subdomains"),
    out_loopback: str = typer.Option("", "--out-loopback", help="Output file for loopback ip subdomains"),
    ipv4: bool = typer.Option(True, "--ipv4/--no-ipv4", help="Resolve ipv4 addresses"),
    ipv6: bool = typer.Option(True, "--ipv6/--no-ipv6", help="Resolve ipv6 addresses"),
    resolver: str = typer.Option(
        None, "--resolver", help="Lookup backend: system or dns (env IPSUBMAP_RESOLVER)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Resolve subdomains and split them by loopback, private and public IP."""
    setup_logging(verbose)

    flags = Flags(
        input_file=file,
        out_private=out_private,
        out_public=out_public,
        out_loopback=out_loopback,
        ipv4=ipv4,
        ipv6=ipv6,
        resolver=(resolver or default_resolver()).lower(),
    )
    try:
        flags.validate()
    except ConfigError as e:
        raise typer.BadParameter(str(e))

    try:
        lookup = get_lookup(flags.resolver)
    except dns.exception.DNSException as e:
        log.error("failed to set up %s resolver: %s", flags.resolver, e)
        raise typer.Exit(code=1)

    failed = False
    with ExitStack() as stack:
        try:
            src = stack.enter_context(
                open(flags.input_file, "r", encoding="utf-8", newline="")
            )
            sinks = {
                scope: stack.enter_context(open(path, "xb"))
                for scope, path in flags.outputs().items()
                if path
            }
        except OSError as e:
            log.error("failed to open file: %s", e)
            raise typer.Exit(code=1)

        mapper = IPSubMap(
            ipv4=flags.ipv4,
            ipv6=flags.ipv6,
            private=sinks.get("private"),
            public=sinks.get("public"),
            loopback=sinks.get("loopback"),
            lookup=lookup,
        )

        try:
            errs = mapper.enumerate(src)
        except InputReadError as e:
            log.error("%s", e)
            failed = True
        else:
            for err in errs:
                log.warning("%s", err)
            if errs:
                log.warning("Encountered %d errors while enumerating", len(errs))

        log.info("Writing output files")
        write_errs = mapper.write()
        for err in write_errs:
            log.error("%s", err)
        if write_errs:
            failed = True

    print(f"[bold]Processed[/bold] {mapper.processed} hostnames")
    for scope in Scope:
        report = mapper.report(scope)
        if report.enabled:
            print(f"  - {scope.value}: {len(report)} ips")

    if failed:
        raise typer.Exit(code=1)


def main():
    app()


if __name__ == "__main__":
    main()
