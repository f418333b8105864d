"""Registry fallback for referral-only WHOIS answers.

When the default responder only returns the IANA referral for a TLD, the
answer says nothing about the domain. For TLDs with a known authoritative
registry host, one extra query is sent there after a short backoff and the
two answers are classified together.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from core.config import AppSettings
from core.domain.models import ClassificationOutcome, DomainTask, QueryResult, RateLimited
from core.domain.status import QuerySource
from core.interfaces.querier import WhoisQuerier
from core.services.classifier import (
    classify,
    is_registry_rate_limited,
    needs_registry_fallback,
)

logger = logging.getLogger(__name__)


class RegistryFallback:
    """Decides on, runs and merges the secondary registry lookup."""

    def __init__(
        self,
        querier: WhoisQuerier,
        settings: AppSettings | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._querier = querier
        self._settings = settings or AppSettings()
        self._sleep = sleep

    def server_for(self, task: DomainTask) -> str | None:
        return self._settings.registry_server_for(task.tld)

    def applies(self, task: DomainTask, primary: QueryResult) -> bool:
        if primary.source is not QuerySource.PRIMARY:
            return False
        if self.server_for(task) is None:
            return False
        return needs_registry_fallback(primary.raw_text)

    async def maybe_retry(self, task: DomainTask, primary: QueryResult) -> QueryResult | None:
        """Secondary query against the registry, or None when not eligible."""

        if not self.applies(task, primary):
            return None
        server = self.server_for(task)
        delay = self._settings.fallback_backoff_seconds
        logger.info("referral-only answer for %s; asking %s in %.1fs", task.domain, server, delay)
        if delay > 0:
            await self._sleep(delay)
        return await self._querier.query(
            task.domain,
            server=server,
            source=QuerySource.REGISTRY_FALLBACK,
        )

    async def resolve(
        self,
        task: DomainTask,
        primary: QueryResult,
    ) -> tuple[ClassificationOutcome, QueryResult | None]:
        """Final outcome for `task`, running the fallback at most once."""

        secondary = await self.maybe_retry(task, primary)
        if secondary is None:
            return classify(primary.raw_text), None

        if is_registry_rate_limited(secondary.raw_text):
            return RateLimited(), secondary
        if not secondary.raw_text.strip():
            logger.info("registry fallback for %s returned nothing", task.domain)
            return classify(primary.raw_text), secondary
        return classify(merge_responses(primary, secondary)), secondary


def merge_responses(primary: QueryResult, secondary: QueryResult) -> str:
    """Primary text first, then the registry answer."""

    head = primary.raw_text.rstrip("\n")
    return f"{head}\n{secondary.raw_text}"
