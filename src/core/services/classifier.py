"""WHOIS response classification.

The decision procedure is an ordered rule table: each `ClassificationRule`
pairs a predicate over the raw text with a function producing the outcome.
The first rule whose predicate matches wins. The registry fallback asks
`evaluate` whether the referral rule fired.

Registration evidence is checked before availability evidence, and anything
ambiguous ends up `Unknown` rather than `Available`.

Several registration markers are bound to the `.ai` suffix (the `Domain Name:`
line and the exclusion of the `.NIC.AI` TLD servers). They are kept
TLD-specific on purpose; other TLDs are still recognised through the generic
registrar/status markers.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Callable

from core.domain.models import (
    Available,
    ClassificationOutcome,
    RateLimited,
    Taken,
    Unknown,
)
from core.domain.status import UnknownReason

BOUND_SUFFIX = ".ai"
TLD_NAME_SERVER_MARKER = ".NIC.AI"

_DOMAIN_NAME_LINE = re.compile(
    r"Domain Name:[ \t]+\S+" + re.escape(BOUND_SUFFIX), re.IGNORECASE
)
_REGISTERED = re.compile(
    r"Domain Name:[ \t]+\S+" + re.escape(BOUND_SUFFIX)
    + r"|Registry Domain ID|Registrar WHOIS Server|Registrar:|Registry Registrant|Domain Status:",
    re.IGNORECASE,
)
_NAME_SERVER = re.compile(r"Name Server:|nserver:", re.IGNORECASE)
_EXPIRY_LINE = re.compile(
    r"Expiry Date|Expiration Date|Registry Expiry Date|Expiration Time|expires:",
    re.IGNORECASE,
)
_ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

_AVAILABLE = re.compile(
    r"Domain not found|No match|NOT FOUND|No entries found|Status:[ \t]*(free|available)"
    r"|is available for registration|No Data Found|not registered|No such domain",
    re.IGNORECASE,
)
_RATE_LIMIT = re.compile(
    r"rate limit|too many requests|quota exceeded|connection refused|timeout|timed out",
    re.IGNORECASE,
)
# Registry answers are screened without the generic timeout words.
REGISTRY_RATE_LIMIT = re.compile(
    r"rate limit|too many requests|quota exceeded|connection refused",
    re.IGNORECASE,
)
_IANA_REFERRAL = re.compile(r"IANA WHOIS|This query returned", re.IGNORECASE)
_DOMAIN_INFO = re.compile(r"domain name|registrant|registrar|name server", re.IGNORECASE)

INCOMPLETE_MIN_LINES = 10
INSUFFICIENT_MAX_LINES = 3


@dataclass(frozen=True)
class ClassificationRule:
    """Predicate -> outcome. `decide` returning None means "defer"."""

    name: str
    matches: Callable[[str], bool]
    decide: Callable[[str], ClassificationOutcome | None]


@dataclass(frozen=True)
class RuleMatch:
    rule: str
    outcome: ClassificationOutcome | None

    @property
    def deferred(self) -> bool:
        return self.outcome is None


def _lines(raw_text: str) -> list[str]:
    return raw_text.splitlines()


def extract_expiry_date(raw_text: str) -> date | None:
    """First ISO date found on any expiry-labelled line.

    Dates are collected across all matching lines in order, de-duplicated, and
    the first one that is a real calendar date wins (even when a later label
    looks more specific).
    """

    seen: list[str] = []
    for line in _lines(raw_text):
        if not _EXPIRY_LINE.search(line):
            continue
        for candidate in _ISO_DATE.findall(line):
            if candidate not in seen:
                seen.append(candidate)
    for candidate in seen:
        try:
            return date.fromisoformat(candidate)
        except ValueError:
            continue
    return None


def extract_name_servers(raw_text: str) -> tuple[str, ...]:
    """Domain-bound name server lines, excluding the TLD's own servers.

    Only collected when the `.ai`-bound `Domain Name:` line is present, since
    IANA referral answers also carry `nserver:` lines for the TLD itself.
    """

    if not _DOMAIN_NAME_LINE.search(raw_text):
        return ()
    servers: list[str] = []
    for line in _lines(raw_text):
        if _NAME_SERVER.search(line) and TLD_NAME_SERVER_MARKER not in line:
            servers.append(line.strip())
    return tuple(servers)


def _taken(raw_text: str) -> Taken:
    return Taken(
        expiry_date=extract_expiry_date(raw_text),
        name_servers=extract_name_servers(raw_text),
    )


def _unknown(raw_text: str) -> Unknown:
    line_count = len(_lines(raw_text))
    if not _DOMAIN_INFO.search(raw_text) and line_count > INCOMPLETE_MIN_LINES:
        return Unknown(reason=UnknownReason.INCOMPLETE_QUERY)
    if not raw_text.strip() or line_count < INSUFFICIENT_MAX_LINES:
        return Unknown(reason=UnknownReason.INSUFFICIENT_DATA)
    return Unknown(reason=UnknownReason.INDETERMINATE)


REFERRAL_RULE = "referral_only"

RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="registered",
        matches=lambda text: bool(_REGISTERED.search(text)),
        decide=_taken,
    ),
    ClassificationRule(
        name="available",
        matches=lambda text: bool(_AVAILABLE.search(text)),
        decide=lambda _text: Available(),
    ),
    ClassificationRule(
        name="rate_limited",
        matches=lambda text: bool(_RATE_LIMIT.search(text)),
        decide=lambda _text: RateLimited(),
    ),
    ClassificationRule(
        name=REFERRAL_RULE,
        matches=lambda text: bool(_IANA_REFERRAL.search(text)),
        decide=lambda _text: None,
    ),
    ClassificationRule(
        name="unknown",
        matches=lambda _text: True,
        decide=_unknown,
    ),
)


def evaluate(raw_text: str, *, allow_deferral: bool = True) -> RuleMatch:
    """Run the rule table and report which rule decided.

    With `allow_deferral=False` the referral rule is skipped so the result
    always carries a final outcome.
    """

    for rule in RULES:
        if not allow_deferral and rule.name == REFERRAL_RULE:
            continue
        if rule.matches(raw_text):
            return RuleMatch(rule=rule.name, outcome=rule.decide(raw_text))
    # The last rule always matches.
    raise AssertionError("classification rule table has no catch-all rule")


def classify(raw_text: str) -> ClassificationOutcome:
    """Final outcome for `raw_text`; never deferred."""

    outcome = evaluate(raw_text, allow_deferral=False).outcome
    assert outcome is not None
    return outcome


def needs_registry_fallback(raw_text: str) -> bool:
    """True when only the referral rule could say anything about `raw_text`."""

    return evaluate(raw_text).rule == REFERRAL_RULE


def is_registry_rate_limited(raw_text: str) -> bool:
    return bool(REGISTRY_RATE_LIMIT.search(raw_text))
