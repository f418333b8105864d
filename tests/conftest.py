from __future__ import annotations

import pytest

from core.config import AppSettings


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(
        whois_timeout_seconds=10,
        fallback_backoff_seconds=0,
        batch_launch_delay=0,
        batch_output_path=tmp_path / "checked.txt",
        tld_file=tmp_path / "tlds.txt",
        _env_file=None,
    )
