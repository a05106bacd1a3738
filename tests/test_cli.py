from __future__ import annotations

from pathlib import Path

import dns.resolver
import pytest
from typer.testing import CliRunner

import ipsubmap.cli as cli


@pytest.fixture()
def runner(monkeypatch: pytest.MonkeyPatch, fake_lookup) -> CliRunner:
    monkeypatch.delenv("IPSUBMAP_RESOLVER", raising=False)
    monkeypatch.setattr(cli, "get_lookup", lambda backend: fake_lookup)
    return CliRunner()


@pytest.fixture()
def subs(tmp_path: Path) -> Path:
    path = tmp_path / "subs.txt"
    path.write_text(
        "good.example\n\nbad.invalid\ngood2.example\nintranet.example\nlocal.example\n",
        encoding="utf-8",
    )
    return path


def test_run_writes_requested_scopes(runner: CliRunner, subs: Path, tmp_path: Path) -> None:
    public = tmp_path / "public.txt"
    private = tmp_path / "private.txt"
    result = runner.invoke(
        cli.app,
        ["--file", str(subs), "--out-public", str(public), "--out-private", str(private), "--no-ipv6"],
    )
    assert result.exit_code == 0, result.output
    assert public.read_text(encoding="utf-8") == "93.184.216.34 good.example,good2.example\n"
    assert private.read_text(encoding="utf-8") == "10.0.0.2 intranet.example\n"
    assert not (tmp_path / "loopback.txt").exists()
    assert "bad.invalid" in result.output


def test_run_with_both_versions(runner: CliRunner, subs: Path, tmp_path: Path) -> None:
    loopback = tmp_path / "loopback.txt"
    result = runner.invoke(cli.app, ["-f", str(subs), "--out-loopback", str(loopback)])
    assert result.exit_code == 0, result.output
    assert loopback.read_text(encoding="utf-8") == "127.0.0.1 local.example\n::1 local.example\n"


def test_run_rejects_existing_output(runner: CliRunner, subs: Path, tmp_path: Path) -> None:
    public = tmp_path / "public.txt"
    public.write_text("keep me\n", encoding="utf-8")
    result = runner.invoke(cli.app, ["--file", str(subs), "--out-public", str(public)])
    assert result.exit_code == 2
    assert public.read_text(encoding="utf-8") == "keep me\n"


def test_run_requires_an_output(runner: CliRunner, subs: Path) -> None:
    result = runner.invoke(cli.app, ["--file", str(subs)])
    assert result.exit_code == 2


def test_run_requires_an_ip_version(runner: CliRunner, subs: Path, tmp_path: Path) -> None:
    result = runner.invoke(
        cli.app,
        ["--file", str(subs), "--out-public", str(tmp_path / "p.txt"), "--no-ipv4", "--no-ipv6"],
    )
    assert result.exit_code == 2
    assert not (tmp_path / "p.txt").exists()


def test_run_input_read_error_still_writes(
    runner: CliRunner, tmp_path: Path
) -> None:
    subs = tmp_path / "subs.txt"
    # past the first decode chunk so good.example is read before the failure
    subs.write_bytes(b"good.example\n" + b"\n" * 20000 + b"\xff\xfe\n")
    public = tmp_path / "public.txt"
    result = runner.invoke(cli.app, ["--file", str(subs), "--out-public", str(public), "--no-ipv6"])
    assert result.exit_code == 1
    assert public.read_text(encoding="utf-8") == "93.184.216.34 good.example\n"


def test_run_with_bad_log_level(
    runner: CliRunner, monkeypatch: pytest.MonkeyPatch, subs: Path, tmp_path: Path
) -> None:
    monkeypatch.setenv("IPSUBMAP_LOG_LEVEL", "LOUD")
    public = tmp_path / "public.txt"
    result = runner.invoke(cli.app, ["--file", str(subs), "--out-public", str(public), "--no-ipv6"])
    assert result.exit_code == 0, result.output
    assert public.read_text(encoding="utf-8") == "93.184.216.34 good.example,good2.example\n"


def test_run_keeps_bare_carriage_returns(runner: CliRunner, tmp_path: Path) -> None:
    subs = tmp_path / "subs.txt"
    subs.write_bytes(b"good.example\r\ngood2.example\rextra\n")
    public = tmp_path / "public.txt"
    result = runner.invoke(cli.app, ["--file", str(subs), "--out-public", str(public), "--no-ipv6"])
    assert result.exit_code == 0, result.output
    assert public.read_text(encoding="utf-8", newline="") == "93.184.216.34 good.example\n"


def test_run_dns_resolver_without_system_config(
    monkeypatch: pytest.MonkeyPatch, subs: Path, tmp_path: Path
) -> None:
    def no_config(configure: bool = True):
        raise dns.resolver.NoResolverConfiguration("cannot open /etc/resolv.conf")

    monkeypatch.delenv("IPSUBMAP_DNS_NAMESERVERS", raising=False)
    monkeypatch.setattr(dns.resolver, "Resolver", no_config)
    public = tmp_path / "public.txt"
    result = CliRunner().invoke(
        cli.app, ["--file", str(subs), "--out-public", str(public), "--resolver", "dns"]
    )
    assert result.exit_code == 1
    assert not isinstance(result.exception, dns.resolver.NoResolverConfiguration)
    assert not public.exists()
