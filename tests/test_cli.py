from __future__ import annotations

import pytest
from typer.testing import CliRunner

import cli.main as cli_main
from tests.fakes import FakeQuerier
from tests.samples import IANA_REFERRAL, NOT_FOUND_AI, REGISTERED_AI

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TLDHUNT_FALLBACK_BACKOFF_SECONDS", "0")
    monkeypatch.setenv("TLDHUNT_BATCH_LAUNCH_DELAY", "0")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setattr(cli_main, "whois_available", lambda settings=None: True)


@pytest.fixture
def querier(monkeypatch) -> FakeQuerier:
    fake = FakeQuerier(
        {
            ("kw.com", None): REGISTERED_AI.replace("example.ai", "kw.com"),
            ("kw.ai", None): IANA_REFERRAL,
            ("kw.ai", "whois.nic.ai"): NOT_FOUND_AI,
        }
    )
    monkeypatch.setattr(cli_main, "build_querier", lambda settings: fake)
    return fake


@pytest.mark.parametrize(
    ("args", "message"),
    [
        (["hunt", "-q", "-e", ".ai"], "Keyword is required"),
        (["hunt", "-q", "-k", "kw"], "Either -e or -E option is required"),
        (["hunt", "-q", "-k", "kw", "-e", ".ai", "-E", "tlds.txt"], "only specify one of -e or -E"),
        (["hunt", "-q", "-k", "kw", "-E", "missing.txt"], "not found"),
        (["hunt", "-q", "--update-tld", "-k", "kw"], "--update-tld cannot be used"),
        (["hunt", "-q", "-k", "kw", "-e", "."], "Invalid TLD"),
        (["hunt", "-q", "-k", "kw", "-e", "a b"], "Invalid TLD"),
    ],
)
def test_invalid_arguments_exit_with_usage(args, message):
    result = runner.invoke(cli_main.app, args)

    assert result.exit_code == 2
    assert message in result.output


def test_missing_whois_aborts_before_queries(monkeypatch, querier):
    monkeypatch.setattr(cli_main, "whois_available", lambda settings=None: False)

    result = runner.invoke(cli_main.app, ["hunt", "-q", "-k", "kw", "-e", ".ai"])

    assert result.exit_code == 1
    assert "not installed" in result.output
    assert querier.calls == []


def test_hunt_single_tld(querier):
    result = runner.invoke(cli_main.app, ["hunt", "-q", "-k", "kw", "-e", ".ai"])

    assert result.exit_code == 0, result.output
    assert "[avail] kw.ai" in result.output


def test_hunt_tld_file_and_not_registered_filter(tmp_path, querier):
    (tmp_path / "tlds.txt").write_text(".com\n.ai\n")

    result = runner.invoke(cli_main.app, ["hunt", "-q", "-k", "kw", "-E", "tlds.txt", "-x"])

    assert result.exit_code == 0, result.output
    assert "[avail] kw.ai" in result.output
    assert "kw.com" not in result.output


def test_hunt_shows_taken_with_expiry(tmp_path, querier):
    (tmp_path / "tlds.txt").write_text(".com\n")

    result = runner.invoke(cli_main.app, ["hunt", "-q", "-k", "kw", "-E", "tlds.txt"])

    assert "[taken] kw.com - Exp Date: 2027-05-12" in result.output


def test_update_tld(monkeypatch, tmp_path):
    calls = []

    def fake_refresh(*, settings):
        calls.append(settings.tld_file)
        return [".ai", ".com"]

    monkeypatch.setattr(cli_main, "refresh_tld_list", fake_refresh)

    result = runner.invoke(cli_main.app, ["hunt", "-q", "--update-tld"])

    assert result.exit_code == 0, result.output
    assert "2 TLDs have been saved" in result.output
    assert len(calls) == 1


def test_batch_writes_log_and_resumes(tmp_path, querier):
    wordlist = tmp_path / "words.txt"
    wordlist.write_text("kw\nother\n")
    output = tmp_path / "checked.txt"

    first = runner.invoke(cli_main.app, ["batch", str(wordlist), "-o", str(output)])

    assert first.exit_code == 0, first.output
    log = output.read_text()
    assert "Checking: kw.ai\n[avail] kw.ai\n\n" in log
    assert "Checking: other.ai\n" in log
    assert "kw.ai: [avail] kw.ai" in first.output

    querier.calls.clear()
    second = runner.invoke(cli_main.app, ["batch", str(wordlist), "-o", str(output)])

    assert second.exit_code == 0, second.output
    assert "found 2 previously processed words" in second.output
    assert querier.calls == []


def test_batch_missing_wordlist_is_usage_error(tmp_path):
    result = runner.invoke(cli_main.app, ["batch", str(tmp_path / "nope.txt")])

    assert result.exit_code == 2


def test_batch_invalid_tld_is_usage_error(tmp_path, querier):
    wordlist = tmp_path / "words.txt"
    wordlist.write_text("kw\n")

    result = runner.invoke(cli_main.app, ["batch", str(wordlist), "--tld", "."])

    assert result.exit_code == 2
    assert "Invalid TLD" in result.output
    assert querier.calls == []


def test_hunt_skips_bad_tld_file_lines(tmp_path, querier):
    (tmp_path / "tlds.txt").write_text(".\n.ai\n")

    result = runner.invoke(cli_main.app, ["hunt", "-q", "-k", "kw", "-E", "tlds.txt"])

    assert result.exit_code == 0, result.output
    assert "[avail] kw.ai" in result.output
