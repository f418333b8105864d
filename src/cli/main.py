"""tldhunt command line (Typer).

Commands:
- `hunt`: one keyword against one TLD or a TLD file (or `--update-tld`).
- `batch`: a wordlist against one TLD, resumable via the progress log.
- `doctor`: environment diagnostics.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

import httpx
import typer
from rich.console import Console

from adapters.whois_client import WhoisClient, whois_available
from cli import doctor
from cli.ui_components import (
    configure_logging,
    print_banner,
    print_batch_line,
    print_progress,
    print_report,
)
from core.config import AppSettings
from core.domain.models import DomainReport, is_valid_tld
from core.interfaces.querier import WhoisQuerier
from core.resources_loader import count_words, load_tld_file, refresh_tld_list
from core.services.hunt_pipeline import BatchRequest, PipelineHooks, run_batch, run_direct

app = typer.Typer(
    no_args_is_help=True,
    help="Check domain availability across TLDs with WHOIS.",
)
app.add_typer(doctor.app, name="doctor")

_console = Console(soft_wrap=True)
_err_console = Console(stderr=True)


def build_querier(settings: AppSettings) -> WhoisQuerier:
    return WhoisClient(settings)


def _require_whois(settings: AppSettings) -> None:
    if not whois_available(settings):
        _err_console.print(
            f"[red]{settings.whois_command} not installed.[/red] "
            "You must install whois to use this tool."
        )
        raise typer.Exit(code=1)


@app.callback()
def main() -> None:
    """Configure logging before any command runs."""

    configure_logging(AppSettings().log_level, console=_err_console)


@app.command()
def hunt(
    keyword: Optional[str] = typer.Option(None, "-k", "--keyword", help="Keyword to combine with each TLD."),
    tld: Optional[str] = typer.Option(None, "-e", "--tld", help="Single TLD, e.g. .ai"),
    tld_file: Optional[Path] = typer.Option(None, "-E", "--tld-file", help="File with one TLD per line."),
    not_registered: bool = typer.Option(False, "-x", "--not-registered", help="Hide taken domains."),
    quiet: bool = typer.Option(False, "-q", "--quiet", help="Do not print the banner."),
    update_tld: bool = typer.Option(False, "--update-tld", help="Download the IANA TLD list and exit."),
) -> None:
    """Check KEYWORD against one TLD (-e) or every TLD in a file (-E)."""

    settings = AppSettings()
    if not quiet:
        print_banner(_console)

    if update_tld:
        if keyword or tld or tld_file or not_registered:
            raise typer.BadParameter("--update-tld cannot be used with other flags.")
        _console.print(f"Fetching TLD data from {settings.tld_url}...")
        try:
            tlds = refresh_tld_list(settings=settings)
        except httpx.HTTPError as exc:
            _err_console.print(f"[red]TLD download failed:[/red] {exc}")
            raise typer.Exit(code=1) from exc
        _console.print(f"{len(tlds)} TLDs have been saved to {settings.tld_file}.")
        return

    if not keyword:
        raise typer.BadParameter("Keyword is required.", param_hint="-k/--keyword")
    if tld and tld_file:
        raise typer.BadParameter("You can only specify one of -e or -E options.")
    if not tld and not tld_file:
        raise typer.BadParameter("Either -e or -E option is required.")
    if tld_file and not tld_file.is_file():
        raise typer.BadParameter(f"TLD file {tld_file} not found.", param_hint="-E/--tld-file")
    if tld and not is_valid_tld(tld):
        raise typer.BadParameter(f"Invalid TLD: {tld!r}.", param_hint="-e/--tld")

    _require_whois(settings)

    tlds = load_tld_file(tld_file) if tld_file else [tld]

    def show(report: DomainReport) -> None:
        print_report(_console, report, not_registered_only=not_registered)

    asyncio.run(
        run_direct(
            settings=settings,
            keyword=keyword,
            tlds=tlds,
            querier=build_querier(settings),
            hooks=PipelineHooks(report=show),
        )
    )


@app.command()
def batch(
    wordlist: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="One word per line."),
    tld: str = typer.Option(".ai", "--tld", help="TLD appended to every word."),
    max_jobs: Optional[int] = typer.Option(None, "-j", "--max-jobs", min=1, help="Concurrent lookups (default 20)."),
    delay: Optional[float] = typer.Option(None, "-d", "--delay", min=0.0, help="Seconds between launches (default 0.2)."),
    reset: bool = typer.Option(False, "--reset", help="Clear the output file instead of resuming."),
    start_from: Optional[str] = typer.Option(None, "--start-from", help="Skip words before this one."),
    output: Optional[Path] = typer.Option(None, "-o", "--output", help="Progress log (default checked.txt)."),
) -> None:
    """Check every word of WORDLIST against one TLD, resuming from the log."""

    if not is_valid_tld(tld):
        raise typer.BadParameter(f"Invalid TLD: {tld!r}.", param_hint="--tld")

    settings = AppSettings()
    _require_whois(settings)

    output_path = output or settings.batch_output_path
    jobs = max_jobs or settings.batch_max_concurrency
    launch_delay = settings.batch_launch_delay if delay is None else delay
    total = count_words(wordlist)

    def resumed(count: int) -> None:
        if reset:
            _console.print(f"Starting fresh. Existing {output_path} has been cleared.")
        elif count:
            _console.print(f"Resuming run: found {count} previously processed words in {output_path}")

    def show(report: DomainReport) -> None:
        print_batch_line(_console, report)

    def progress(done: int, all_words: int) -> None:
        print_progress(_console, done, all_words)

    hooks = PipelineHooks(report=show, progress=progress, resumed=resumed)
    request = BatchRequest(
        wordlist=wordlist,
        tld=tld,
        output_path=output_path,
        max_concurrency=jobs,
        launch_delay=launch_delay,
        reset=reset,
        start_from=start_from,
    )

    _console.print(f"Processing {total} words with up to {jobs} concurrent checks...")
    if start_from:
        _console.print(f"Starting from word: {start_from}")
    _console.print(f"Rate limit delay: {launch_delay}s between job starts")
    _console.print(f"Results will be saved to {output_path}\n")

    summary = asyncio.run(
        run_batch(
            settings=settings,
            request=request,
            querier=build_querier(settings),
            hooks=hooks,
        )
    )
    _console.print(
        f"\nDone! Checked {summary.checked} of {summary.total} words "
        f"({summary.skipped} skipped). Results saved to {output_path}"
    )


def run() -> None:
    app()
