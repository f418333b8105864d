"""Test doubles for the query layer."""

from __future__ import annotations

import asyncio
from typing import Callable

from core.domain.models import QueryResult
from core.domain.status import QuerySource


class FakeQuerier:
    """In-memory `WhoisQuerier` with scripted answers per (domain, server)."""

    def __init__(
        self,
        answers: dict[tuple[str, str | None], str] | None = None,
        *,
        default: str = "",
        responder: Callable[[str, str | None], str] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.answers = answers or {}
        self.default = default
        self.responder = responder
        self.delay = delay
        self.calls: list[tuple[str, str | None, QuerySource]] = []
        self.in_flight = 0
        self.peak_in_flight = 0

    async def query(
        self,
        domain: str,
        *,
        server: str | None = None,
        source: QuerySource = QuerySource.PRIMARY,
    ) -> QueryResult:
        self.calls.append((domain, server, source))
        self.in_flight += 1
        self.peak_in_flight = max(self.peak_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.responder is not None:
                text = self.responder(domain, server)
            else:
                text = self.answers.get((domain, server), self.default)
        finally:
            self.in_flight -= 1
        return QueryResult(raw_text=text, source=source, timed_out=False, server=server)

    def domains(self, source: QuerySource | None = None) -> list[str]:
        return [d for d, _, s in self.calls if source is None or s is source]
