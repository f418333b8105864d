"""Append-only batch progress log with resume support.

Format (human readable, one block per checked domain)::

    Checking: <word><tld>
    <status line>
    <blank line>

The file is the only source of truth for resuming: on start, every header
line ending in the batch TLD that is followed by a result line puts its word
into the `processed` set. Lines that do not parse are ignored, so a damaged
or truncated block only means the word is checked again.
"""

from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

from core.domain.models import BatchRecord, normalize_tld

logger = logging.getLogger(__name__)

HEADER_PREFIX = "Checking: "


class ResumeLog:
    """Owns the progress log of one batch run."""

    def __init__(self, path: Path, tld: str) -> None:
        self.path = Path(path)
        self.tld = normalize_tld(tld)
        self._header = re.compile(
            r"^" + re.escape(HEADER_PREFIX) + r"(.+)" + re.escape(self.tld) + r"$"
        )
        self._lock = asyncio.Lock()
        self._processed: frozenset[str] = frozenset()

    @property
    def processed(self) -> frozenset[str]:
        return self._processed

    def open(self, *, reset: bool = False) -> frozenset[str]:
        """Load (or truncate, with `reset`) the log and return the resume set."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        if reset or not self.path.exists():
            self.path.write_text("", encoding="utf-8")
            self._processed = frozenset()
            if reset:
                logger.info("cleared %s", self.path)
            return self._processed

        self._processed = frozenset(self.parse(self.path.read_text(encoding="utf-8", errors="replace")))
        logger.info("resuming: %d words already in %s", len(self._processed), self.path)
        return self._processed

    def parse(self, text: str) -> set[str]:
        """Words whose header is followed by a result line.

        A header directly followed by another header, a blank line or the end
        of the file has no result and is left out.
        """

        words: set[str] = set()
        lines = text.splitlines()
        for index, line in enumerate(lines):
            match = self._header.match(line)
            if not match:
                continue
            result = lines[index + 1] if index + 1 < len(lines) else ""
            if result.strip() and not result.startswith(HEADER_PREFIX):
                words.add(match.group(1))
        return words

    def pending(self, words: Iterable[str], *, start_from: str | None = None) -> Iterator[str]:
        """Words still to check, honouring the start-from cursor and resume set."""

        reached = not start_from
        for word in words:
            if not reached:
                if word != start_from:
                    continue
                reached = True
                logger.info("reached start word: %s", start_from)
            if word in self._processed:
                continue
            yield word

    async def record(self, domain: str, outcome_text: str) -> BatchRecord:
        """Append one block; concurrent callers never interleave."""

        record = BatchRecord(domain=domain, outcome_text=outcome_text)
        block = record.to_block()
        async with self._lock:
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(block)
                handle.flush()
        return record
