"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Strict validation and self-documenting fields (Field) without tying the
  Core to subprocesses or files.
- Frozen models make tasks and query results safe to hand to concurrent
  workers.

Note:
- These models describe *what* a lookup produced, not *how* it was obtained.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from core.domain.status import (
    RATE_LIMITED_DETAIL,
    QuerySource,
    StatusTag,
    UnknownReason,
)


def normalize_tld(value: str) -> str:
    """Lower-case a TLD and make sure it carries a leading dot."""

    cleaned = value.strip().lower()
    if cleaned and not cleaned.startswith("."):
        cleaned = f".{cleaned}"
    return cleaned


_TLD_SHAPE = re.compile(r"^(\.[^\s.]+)+$")


def is_valid_tld(value: str) -> bool:
    """True when `value` normalises to dot-separated, non-empty labels."""

    return bool(_TLD_SHAPE.match(normalize_tld(value)))


class DomainTask(BaseModel):
    """One keyword + TLD combination to check."""

    model_config = ConfigDict(frozen=True)

    keyword: str = Field(
        ...,
        min_length=1,
        description="Label placed in front of the TLD.",
    )
    tld: str = Field(
        ...,
        min_length=2,
        description="Dot-prefixed TLD suffix (e.g. '.ai').",
    )

    @field_validator("tld")
    @classmethod
    def _normalize_tld(cls, value: str) -> str:
        return normalize_tld(value)

    @property
    def domain(self) -> str:
        return f"{self.keyword}{self.tld}"


class QueryResult(BaseModel):
    """Raw outcome of a single WHOIS invocation."""

    model_config = ConfigDict(frozen=True)

    raw_text: str = Field(
        default="",
        description="Standard output of the whois client (may be empty).",
    )
    source: QuerySource = Field(
        default=QuerySource.PRIMARY,
        description="Whether this was the default lookup or the registry retry.",
    )
    timed_out: bool = Field(
        default=False,
        description="True when the deadline expired or the process could not be spawned.",
    )
    server: str | None = Field(
        default=None,
        description="Explicit WHOIS host passed with -h, if any.",
    )


class _Outcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    @property
    def tag(self) -> StatusTag:
        raise NotImplementedError

    def detail(self) -> str | None:
        return None

    def status_line(self, domain: str) -> str:
        """Plain `[tag] domain - detail` line (no markup)."""

        line = f"[{self.tag.value}] {domain}"
        detail = self.detail()
        if detail:
            line = f"{line} - {detail}"
        return line


class Taken(_Outcome):
    status: Literal["taken"] = "taken"
    expiry_date: date | None = Field(
        default=None,
        description="First ISO date found on an expiry-labelled line.",
    )
    name_servers: tuple[str, ...] = Field(
        default=(),
        description="Domain-bound name server lines; informational only.",
    )

    @property
    def tag(self) -> StatusTag:
        return StatusTag.TAKEN

    def detail(self) -> str:
        if self.expiry_date is None:
            return "No expiry date found"
        return f"Exp Date: {self.expiry_date.isoformat()}"


class Available(_Outcome):
    status: Literal["available"] = "available"

    @property
    def tag(self) -> StatusTag:
        return StatusTag.AVAILABLE


class RateLimited(_Outcome):
    status: Literal["rate_limited"] = "rate_limited"

    @property
    def tag(self) -> StatusTag:
        return StatusTag.RATE_LIMITED

    def detail(self) -> str:
        return RATE_LIMITED_DETAIL


class Unknown(_Outcome):
    status: Literal["unknown"] = "unknown"
    reason: UnknownReason = Field(
        default=UnknownReason.INDETERMINATE,
        description="Heuristic explanation derived from the response shape.",
    )

    @property
    def tag(self) -> StatusTag:
        return StatusTag.UNKNOWN

    def detail(self) -> str:
        return self.reason.label()


ClassificationOutcome = Annotated[
    Union[Taken, Available, RateLimited, Unknown],
    Field(discriminator="status"),
]


class DomainReport(BaseModel):
    """Everything the pipeline learned about one domain.

    Why it exists:
    - The CLI needs the final outcome, the batch log needs its plain line, and
      tests need to see whether the registry retry happened.
    """

    model_config = ConfigDict(frozen=True)

    task: DomainTask
    outcome: ClassificationOutcome
    primary: QueryResult
    secondary: QueryResult | None = Field(
        default=None,
        description="Registry fallback result, present only when it was attempted.",
    )

    @property
    def domain(self) -> str:
        return self.task.domain

    @property
    def used_fallback(self) -> bool:
        return self.secondary is not None

    def status_line(self) -> str:
        return self.outcome.status_line(self.domain)


class BatchRecord(BaseModel):
    """One persisted block of the batch progress log."""

    model_config = ConfigDict(frozen=True)

    domain: str = Field(..., min_length=1)
    outcome_text: str = Field(default="")

    def to_block(self) -> str:
        body = self.outcome_text.rstrip("\n")
        return f"Checking: {self.domain}\n{body}\n\n"


class BatchSummary(BaseModel):
    total: int = Field(default=0, ge=0, description="Non-blank wordlist entries.")
    skipped: int = Field(default=0, ge=0, description="Entries skipped by resume or start-from.")
    checked: int = Field(default=0, ge=0, description="Domains queried in this run.")
