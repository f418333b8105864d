"""Contract for WHOIS query executors.

Why Protocol:
- Structural contract (duck typing) without rigid inheritance.
- The pipeline and the registry fallback accept anything with `query`, so the
  subprocess client can be swapped for an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.domain.models import QueryResult
from core.domain.status import QuerySource


@runtime_checkable
class WhoisQuerier(Protocol):
    """Minimal contract for a query executor.

    Design rules:
    - `query` is async because it waits on an external process or socket.
    - It never raises for timeouts or spawn failures; those come back as
      `QueryResult(timed_out=True)`.
    """

    async def query(
        self,
        domain: str,
        *,
        server: str | None = None,
        source: QuerySource = QuerySource.PRIMARY,
    ) -> QueryResult:
        """Run one lookup for `domain`, optionally against an explicit `server`."""

        ...
