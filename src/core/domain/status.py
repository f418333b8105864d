"""Status vocabulary shared by the classifier and the CLI.

This module lives in the domain layer so that the rule table, the pipeline
and the console renderer agree on one set of tags and explanations without
importing each other.
"""

from __future__ import annotations

from enum import Enum


class StatusTag(str, Enum):
    """Tag printed between brackets on every status line."""

    TAKEN = "taken"
    AVAILABLE = "avail"
    RATE_LIMITED = "rate-limited"
    UNKNOWN = "unknown"

    def style(self) -> str:
        """Rich style used when the tag is rendered on a terminal."""

        return _STYLES[self]


class UnknownReason(str, Enum):
    """Why a response could not be classified either way."""

    INSUFFICIENT_DATA = "insufficient_data"
    INCOMPLETE_QUERY = "incomplete_query"
    INDETERMINATE = "indeterminate"

    def label(self) -> str:
        return _UNKNOWN_LABELS[self]


class QuerySource(str, Enum):
    PRIMARY = "primary"
    REGISTRY_FALLBACK = "registry_fallback"


_STYLES: dict[StatusTag, str] = {
    StatusTag.TAKEN: "bold red",
    StatusTag.AVAILABLE: "bold green",
    StatusTag.RATE_LIMITED: "bold yellow",
    StatusTag.UNKNOWN: "bold yellow",
}

_UNKNOWN_LABELS: dict[UnknownReason, str] = {
    UnknownReason.INSUFFICIENT_DATA: "Insufficient data",
    UnknownReason.INCOMPLETE_QUERY: "Incomplete query (may be rate-limited)",
    UnknownReason.INDETERMINATE: "Unable to determine status",
}

RATE_LIMITED_DETAIL = "Rate limited by whois server (retry later)"
