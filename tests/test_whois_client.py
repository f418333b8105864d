from __future__ import annotations

import asyncio
import stat
import sys

import pytest

from adapters.whois_client import WhoisClient, whois_available
from core.domain.status import QuerySource

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="uses POSIX shell scripts")


def _script(tmp_path, name: str, body: str):
    path = tmp_path / name
    path.write_text("#!/bin/sh\n" + body)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


def test_build_command_with_and_without_server(settings):
    client = WhoisClient(settings)

    assert client.build_command("foo.ai") == ["whois", "foo.ai"]
    assert client.build_command("foo.ai", server="whois.nic.ai") == [
        "whois",
        "-h",
        "whois.nic.ai",
        "foo.ai",
    ]


def test_deadline_adds_referral_allowance(settings):
    assert settings.deadline_for(".ai") == 15.0
    assert settings.deadline_for(".com") == 10.0


def test_query_returns_stdout(settings, tmp_path):
    script = _script(tmp_path, "fake-whois", 'echo "args: $*"\necho "Domain not found."\n')
    client = WhoisClient(settings.model_copy(update={"whois_command": str(script)}))

    result = asyncio.run(client.query("foo.ai", server="whois.nic.ai", source=QuerySource.REGISTRY_FALLBACK))

    assert result.raw_text == "args: -h whois.nic.ai foo.ai\nDomain not found.\n"
    assert not result.timed_out
    assert result.source is QuerySource.REGISTRY_FALLBACK
    assert result.server == "whois.nic.ai"


def test_stderr_is_discarded(settings, tmp_path):
    script = _script(tmp_path, "noisy-whois", 'echo "oops" >&2\necho "No match"\n')
    client = WhoisClient(settings.model_copy(update={"whois_command": str(script)}))

    result = asyncio.run(client.query("foo.com"))

    assert result.raw_text == "No match\n"


def test_deadline_expiry_yields_empty_timed_out_result(settings, tmp_path):
    script = _script(tmp_path, "slow-whois", "exec sleep 5\n")
    client = WhoisClient(
        settings.model_copy(
            update={
                "whois_command": str(script),
                "whois_timeout_seconds": 0.2,
                "referral_timeout_allowance": {},
            }
        )
    )

    result = asyncio.run(client.query("foo.com"))

    assert result.raw_text == ""
    assert result.timed_out


def test_missing_executable_is_not_fatal(settings, tmp_path):
    client = WhoisClient(settings.model_copy(update={"whois_command": str(tmp_path / "nope")}))

    result = asyncio.run(client.query("foo.com"))

    assert result.raw_text == ""
    assert result.timed_out


def test_disabled_deadline_runs_to_completion(settings, tmp_path):
    script = _script(tmp_path, "ok-whois", "echo Registrar: X\n")
    client = WhoisClient(
        settings.model_copy(update={"whois_command": str(script), "whois_timeout_seconds": None})
    )

    result = asyncio.run(client.query("foo.ai"))

    assert result.raw_text == "Registrar: X\n"
    assert settings.model_copy(update={"whois_timeout_seconds": 0}).deadline_for(".ai") is None


def test_whois_available(settings, tmp_path):
    script = _script(tmp_path, "fake-whois", "exit 0\n")

    assert whois_available(settings.model_copy(update={"whois_command": str(script)}))
    assert not whois_available(settings.model_copy(update={"whois_command": str(tmp_path / "nope")}))


def test_timeout_env_var_overrides_default(monkeypatch):
    from core.config import AppSettings

    monkeypatch.setenv("WHOIS_TIMEOUT", "3")

    assert AppSettings(_env_file=None).whois_timeout_seconds == 3.0
