"""Domain hunting orchestration.

This module holds the query -> classify -> fallback flow and the two run
modes built on top of it. The CLI only parses arguments and prints; every
scheduling and bookkeeping concern lives here so that tests (and future
entry-points) can drive the same pipeline with a fake querier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Sequence

from adapters.resume_log import ResumeLog
from core.config import AppSettings
from core.domain.models import BatchSummary, DomainReport, DomainTask
from core.interfaces.querier import WhoisQuerier
from core.resources_loader import count_words, read_wordlist
from core.services.registry_fallback import RegistryFallback
from core.services.scheduler import BoundedScheduler

logger = logging.getLogger(__name__)


@dataclass
class PipelineHooks:
    """Optional callbacks for UI layers (results, progress)."""

    report: Callable[[DomainReport], None] | None = None
    progress: Callable[[int, int], None] | None = None
    resumed: Callable[[int], None] | None = None


@dataclass
class BatchRequest:
    """Parameters that control a wordlist run."""

    wordlist: Path
    tld: str = ".ai"
    output_path: Path | None = None
    max_concurrency: int | None = None
    launch_delay: float | None = None
    reset: bool = False
    start_from: str | None = None
    words: Sequence[str] | None = field(default=None, repr=False)


async def check_domain(
    task: DomainTask,
    *,
    querier: WhoisQuerier,
    fallback: RegistryFallback,
) -> DomainReport:
    """Primary query, classification, and at most one registry retry."""

    primary = await querier.query(task.domain)
    outcome, secondary = await fallback.resolve(task, primary)
    return DomainReport(task=task, outcome=outcome, primary=primary, secondary=secondary)


def build_tasks(keyword: str, tlds: Iterable[str]) -> list[DomainTask]:
    tasks: list[DomainTask] = []
    seen: set[str] = set()
    for tld in tlds:
        task = DomainTask(keyword=keyword, tld=tld)
        if task.domain in seen:
            continue
        seen.add(task.domain)
        tasks.append(task)
    return tasks


async def run_direct(
    *,
    settings: AppSettings,
    keyword: str,
    tlds: Sequence[str],
    querier: WhoisQuerier,
    hooks: PipelineHooks | None = None,
    fallback: RegistryFallback | None = None,
) -> list[DomainReport]:
    """One keyword against a small TLD set, no spacing between launches."""

    hooks = hooks or PipelineHooks()
    fallback = fallback or RegistryFallback(querier, settings)
    reports: list[DomainReport] = []

    def collect(report: DomainReport) -> None:
        reports.append(report)
        if hooks.report:
            hooks.report(report)

    scheduler: BoundedScheduler[DomainTask, DomainReport] = BoundedScheduler(
        settings.direct_max_concurrency,
    )
    await scheduler.run(
        build_tasks(keyword, tlds),
        lambda task: check_domain(task, querier=querier, fallback=fallback),
        collect,
    )
    return reports


async def run_batch(
    *,
    settings: AppSettings,
    request: BatchRequest,
    querier: WhoisQuerier,
    hooks: PipelineHooks | None = None,
    fallback: RegistryFallback | None = None,
    tracker: ResumeLog | None = None,
) -> BatchSummary:
    """Wordlist against one TLD, resumable through the progress log."""

    hooks = hooks or PipelineHooks()
    fallback = fallback or RegistryFallback(querier, settings)
    tracker = tracker or ResumeLog(request.output_path or settings.batch_output_path, request.tld)
    tracker.open(reset=request.reset)
    if hooks.resumed:
        hooks.resumed(len(tracker.processed))

    if request.words is not None:
        words: Iterable[str] = request.words
        total = len(request.words)
    else:
        words = read_wordlist(request.wordlist)
        total = count_words(request.wordlist)

    already_done = len(tracker.processed)
    checked = 0

    async def record(report: DomainReport) -> None:
        nonlocal checked
        checked += 1
        await tracker.record(report.domain, report.status_line())
        if hooks.report:
            hooks.report(report)

    def progress(done: int) -> None:
        if hooks.progress:
            hooks.progress(done, total)

    scheduler: BoundedScheduler[DomainTask, DomainReport] = BoundedScheduler(
        request.max_concurrency or settings.batch_max_concurrency,
        launch_delay=(
            settings.batch_launch_delay if request.launch_delay is None else request.launch_delay
        ),
        progress_every=settings.progress_every,
        on_progress=progress,
        progress_offset=already_done,
    )
    tasks = (
        DomainTask(keyword=word, tld=tracker.tld)
        for word in tracker.pending(words, start_from=request.start_from)
    )
    launched = await scheduler.run(
        tasks,
        lambda task: check_domain(task, querier=querier, fallback=fallback),
        record,
    )
    logger.info("batch finished: %d launched, %d recorded", launched, checked)
    return BatchSummary(total=total, skipped=max(0, total - launched), checked=checked)
