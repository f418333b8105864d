"""Doctor command for environment diagnostics."""

from __future__ import annotations

import asyncio
import shutil

import typer
from rich.console import Console
from rich.table import Table

from adapters.http_client import check_reachable
from core.config import AppSettings, get_user_env_file

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console()


def collect_checks(settings: AppSettings) -> list[tuple[str, str, str]]:
    """(check, status, details) rows; no network access."""

    rows: list[tuple[str, str, str]] = []

    whois_path = shutil.which(settings.whois_command)
    if whois_path:
        rows.append(("whois client", "OK", whois_path))
    else:
        rows.append(("whois client", "FAIL", f"{settings.whois_command} not found on PATH"))

    if settings.deadline_enabled:
        rows.append(("Query deadline", "OK", f"{settings.whois_timeout_seconds:g}s base"))
        for tld, extra in sorted(settings.referral_timeout_allowance.items()):
            rows.append(("Referral allowance", "OK", f"{tld}: +{extra:g}s"))
    else:
        rows.append(("Query deadline", "WARN", "disabled; hung queries block their slot"))

    for tld, server in sorted(settings.registry_servers.items()):
        rows.append(("Registry fallback", "OK", f"{tld} -> {server}"))

    if settings.tld_file.is_file():
        rows.append(("TLD file", "OK", str(settings.tld_file)))
    else:
        rows.append(("TLD file", "OPTIONAL", f"{settings.tld_file} missing -> run `hunt --update-tld`"))

    env_file = get_user_env_file()
    rows.append(("User config", "OK" if env_file.exists() else "OPTIONAL", str(env_file)))
    return rows


@app.command()
def run() -> None:
    """Run baseline diagnostics and show recommended fixes."""

    settings = AppSettings()

    table = Table(title="tldhunt Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")

    for check, status, details in collect_checks(settings):
        table.add_row(check, status, details)

    # Connectivity (best-effort)
    ok_http, detail_http = asyncio.run(check_reachable(settings.tld_url, settings))
    table.add_row("TLD list source", "OK" if ok_http else "FAIL", detail_http)

    _console.print(table)

    if shutil.which(settings.whois_command) is None:
        _console.print(
            "\n[yellow]Note:[/yellow] install the `whois` package (e.g. `apt install whois`) "
            "or set TLDHUNT_WHOIS_COMMAND."
        )
