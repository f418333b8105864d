"""Input loaders: TLD lists and wordlists.

This module lives in `core/` because:
- it centralises *which* inputs a run needs (TLD list, wordlist) without
  coupling to the CLI
- the TLD refresh and the direct mode share one notion of a normalised TLD.

The IANA list is not shipped with the repo; `refresh_tld_list` downloads it.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import httpx

from core.config import AppSettings
from core.domain.models import is_valid_tld, normalize_tld

logger = logging.getLogger(__name__)


def normalize_tld_lines(text: str) -> list[str]:
    """One dot-prefixed, lower-case TLD per non-comment, non-blank line."""

    tlds: list[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if not is_valid_tld(line):
            logger.warning("skipping invalid TLD entry: %r", line)
            continue
        tlds.append(normalize_tld(line))
    return tlds


def load_tld_file(path: Path) -> list[str]:
    return normalize_tld_lines(path.read_text(encoding="utf-8"))


def read_wordlist(path: Path) -> Iterator[str]:
    """Yield wordlist entries with every whitespace character removed."""

    with path.open("r", encoding="utf-8", errors="replace") as handle:
        for raw_line in handle:
            word = "".join(raw_line.split())
            if word:
                yield word


def count_words(path: Path) -> int:
    with path.open("r", encoding="utf-8", errors="replace") as handle:
        return sum(1 for line in handle if line.strip())


def refresh_tld_list(
    *,
    settings: AppSettings | None = None,
    path: Path | None = None,
    url: str | None = None,
) -> list[str]:
    """Download the IANA TLD list and store it normalised.

    Logic:
    - `#` comment lines (the IANA version header) and blanks are dropped.
    - Every TLD is lower-cased and prefixed with a dot.

    Returns:
    - the TLDs written, in file order.
    """

    settings = settings or AppSettings()
    out_path = path or settings.tld_file
    source = url or settings.tld_url

    resp = httpx.get(
        source,
        timeout=settings.http_timeout_seconds,
        headers={
            "User-Agent": settings.user_agent,
            "Accept": "text/plain",
        },
        follow_redirects=True,
    )
    resp.raise_for_status()

    tlds = normalize_tld_lines(resp.text)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text("".join(f"{tld}\n" for tld in tlds), encoding="utf-8")
    return tlds
