"""Subprocess wrapper around the system `whois` client.

Why a wrapper:
- Standardises deadlines, decoding and failure handling for every lookup.
- Implements `core.interfaces.querier.WhoisQuerier`, so the pipeline can be
  tested with an in-memory fake instead of real processes.

Failures never raise: a spawn error or an expired deadline comes back as an
empty, `timed_out` result and is classified like any other weak evidence.
"""

from __future__ import annotations

import asyncio
import logging
import shutil

from core.config import AppSettings
from core.domain.models import QueryResult
from core.domain.status import QuerySource
from core.interfaces.querier import WhoisQuerier

logger = logging.getLogger(__name__)


def whois_available(settings: AppSettings | None = None) -> bool:
    """True when the configured whois executable can be found on PATH."""

    settings = settings or AppSettings()
    return shutil.which(settings.whois_command) is not None


def _tld_of(domain: str) -> str:
    _, dot, suffix = domain.rpartition(".")
    return f".{suffix}" if dot else ""


class WhoisClient(WhoisQuerier):
    """Runs one `whois` process per query under a per-TLD deadline."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self._settings = settings or AppSettings()
        self._warned_no_deadline = False

    def build_command(self, domain: str, *, server: str | None = None) -> list[str]:
        command = [self._settings.whois_command]
        if server:
            command.extend(["-h", server])
        command.append(domain)
        return command

    async def query(
        self,
        domain: str,
        *,
        server: str | None = None,
        source: QuerySource = QuerySource.PRIMARY,
    ) -> QueryResult:
        deadline = self._settings.deadline_for(_tld_of(domain))
        if deadline is None and not self._warned_no_deadline:
            self._warned_no_deadline = True
            logger.warning("WHOIS deadline disabled; a hung query will hold its slot indefinitely")

        command = self.build_command(domain, server=server)
        logger.debug("whois %s (server=%s, deadline=%s)", domain, server, deadline)

        try:
            proc = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.DEVNULL,
                stdin=asyncio.subprocess.DEVNULL,
            )
        except OSError as exc:
            logger.warning("could not start %s for %s: %s", command[0], domain, exc)
            return QueryResult(raw_text="", source=source, timed_out=True, server=server)

        try:
            stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=deadline)
        except asyncio.TimeoutError:
            logger.info("whois %s exceeded %.1fs", domain, deadline)
            await _terminate(proc)
            return QueryResult(raw_text="", source=source, timed_out=True, server=server)

        text = (stdout or b"").decode("utf-8", errors="replace")
        return QueryResult(raw_text=text, source=source, timed_out=False, server=server)


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is not None:
        return
    try:
        proc.kill()
    except ProcessLookupError:
        return
    await proc.wait()
