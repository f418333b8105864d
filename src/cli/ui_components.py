"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from visual details.
- The same status rendering is used by direct and batch mode.
"""

from __future__ import annotations

import logging
from datetime import datetime

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.text import Text

from core.domain.models import DomainReport, Taken

BANNER = r"""
 _____ _    ___  _  _          _
|_   _| |  |   \| || |_  _ _ _| |_
  | | | |__| |) | __ | || | ' \  _|
  |_| |____|___/|_||_|\_,_|_||_\__|
"""


def print_banner(console: Console) -> None:
    """Print the welcome banner (skipped with --quiet)."""

    body = Text.assemble(
        Text(BANNER.strip("\n"), style="bold cyan"),
        "\n",
        Text("Domain Availability Checker", style="dim"),
    )
    console.print(Panel(body, border_style="cyan", padding=(0, 2), expand=False))


def configure_logging(level: str, *, console: Console | None = None) -> None:
    """Route stdlib logging to stderr through Rich."""

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )


def status_text(report: DomainReport) -> Text:
    """`[tag] domain - detail` with the tag (and expiry date) coloured."""

    outcome = report.outcome
    text = Text("[")
    text.append(outcome.tag.value, style=outcome.tag.style())
    text.append(f"] {report.domain}")

    detail = outcome.detail()
    if not detail:
        return text
    if isinstance(outcome, Taken) and outcome.expiry_date is not None:
        text.append(" - Exp Date: ")
        text.append(outcome.expiry_date.isoformat(), style="yellow")
    else:
        text.append(f" - {detail}")
    return text


def print_report(console: Console, report: DomainReport, *, not_registered_only: bool = False) -> None:
    if not_registered_only and isinstance(report.outcome, Taken):
        return
    console.print(status_text(report), highlight=False)


def print_batch_line(console: Console, report: DomainReport, *, now: datetime | None = None) -> None:
    stamp = (now or datetime.now()).strftime("%H:%M:%S")
    console.print(
        Text(f"[{stamp}] {report.domain}: {report.status_line()}"),
        highlight=False,
    )


def print_progress(console: Console, done: int, total: int) -> None:
    console.print(Text(f"[Progress] Processed {done}/{total} words...", style="cyan"), highlight=False)
