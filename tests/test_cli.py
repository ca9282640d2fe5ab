"""
End-to-end CLI tests using Typer's CliRunner against a temporary calendar.
"""

import json

import pytest
from typer.testing import CliRunner

from daybook.cli import app

runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    # Point --config at a file that does not exist so ~/.config is never read.
    return tmp_path / "daybook.conf"


def _invoke(config_path, *args):
    return runner.invoke(app, ["--config", str(config_path), *args])


class TestBuild:
    def test_build_writes_site_and_exports(self, config_path, events_path, tmp_path):
        site = tmp_path / "site"
        result = _invoke(
            config_path,
            "build",
            "--events",
            str(events_path),
            "--output",
            str(site),
            "--today",
            "2023-06-10",
            "--yes",
        )
        assert result.exit_code == 0, result.output
        assert (site / "index.html").exists()
        assert (site / "2023" / "06" / "10" / "index.html").exists()
        for name in ("birthdays.json", "comps.json", "trans.json"):
            assert (events_path.parent / name).exists()
        births = json.loads((events_path.parent / "birthdays.json").read_text())
        assert births == {"1990+-07-14": ["Alice"], "2024-05-18": ["Bob"]}

    def test_dry_run_writes_nothing(self, config_path, events_path, tmp_path):
        site = tmp_path / "site"
        result = _invoke(
            config_path,
            "build",
            "-e",
            str(events_path),
            "-o",
            str(site),
            "--today",
            "2023-06-10",
            "--dry-run",
        )
        assert result.exit_code == 0, result.output
        assert not site.exists()
        assert not (events_path.parent / "birthdays.json").exists()

    def test_bad_specifier_fails_fast(self, config_path, events_path, tmp_path):
        data = json.loads(events_path.read_text())
        data["2023-02-29"] = [{"birthday": "Nobody"}]
        events_path.write_text(json.dumps(data))
        site = tmp_path / "site"

        result = _invoke(
            config_path, "build", "-e", str(events_path), "-o", str(site), "--yes"
        )
        assert result.exit_code == 1
        assert "invalid-anchor" in result.output
        assert not (site / "index.html").exists()

    def test_keep_going_renders_the_rest(self, config_path, events_path, tmp_path):
        data = json.loads(events_path.read_text())
        data["9999-12-31+1"] = [{"birthday": "Nobody"}]
        events_path.write_text(json.dumps(data))
        site = tmp_path / "site"

        result = _invoke(
            config_path,
            "build",
            "-e",
            str(events_path),
            "-o",
            str(site),
            "--today",
            "2023-06-10",
            "--keep-going",
            "--yes",
        )
        assert result.exit_code == 1
        assert (site / "2024" / "05" / "18" / "index.html").exists()

    def test_missing_events_file_fails_preflight(self, config_path, tmp_path):
        result = _invoke(
            config_path, "build", "-e", str(tmp_path / "nope.json"), "-o", str(tmp_path), "-y"
        )
        assert result.exit_code == 1
        assert "Preflight checks failed" in result.output

    def test_invalid_today(self, config_path, events_path):
        result = _invoke(config_path, "build", "-e", str(events_path), "--today", "June")
        assert result.exit_code == 1
        assert "Invalid date" in result.output

    def test_config_file_supplies_paths(self, config_path, events_path, tmp_path):
        site = tmp_path / "configured-site"
        config_path.write_text(
            f"[daybook]\nevents_path = {events_path}\noutput_dir = {site}\n"
        )
        result = _invoke(config_path, "build", "--today", "2023-06-10", "--yes")
        assert result.exit_code == 0, result.output
        assert (site / "index.html").exists()


class TestCheck:
    def test_clean_calendar(self, config_path, events_path):
        result = _invoke(config_path, "check", "-e", str(events_path), "--today", "2023-06-10")
        assert result.exit_code == 0, result.output
        assert "All" in result.output

    def test_reports_each_kind(self, config_path, events_path):
        data = json.loads(events_path.read_text())
        data["2023-02-29"] = []
        data["2000-01-01+5--01"] = []
        data["9999+1-01-01"] = []
        events_path.write_text(json.dumps(data))

        result = _invoke(config_path, "check", "-e", str(events_path))
        assert result.exit_code == 1
        assert "MALFORMED" in result.output
        assert "INVALID_ANCHOR" in result.output
        assert "OVERFLOW" in result.output
        assert "3 issue(s) found" in result.output


class TestExpand:
    def test_prints_resolution_and_dates(self, config_path):
        result = _invoke(config_path, "expand", "2000+-01-01", "--today", "2023-06-10")
        assert result.exit_code == 0, result.output
        assert "2023-01-01" in result.output
        assert "1 year" in result.output
        assert "years=23" in result.output

    def test_limit(self, config_path):
        result = _invoke(config_path, "expand", "2020-06-15+10", "--limit", "2")
        assert result.exit_code == 0, result.output
        assert "2020-06-16" in result.output
        assert "2020-06-17" not in result.output

    def test_malformed(self, config_path):
        result = _invoke(config_path, "expand", "2020-6-15")
        assert result.exit_code == 1
        assert "malformed" in result.output


class TestStatus:
    def test_counts_by_kind(self, config_path, events_path):
        config_path.write_text(f"[daybook]\nevents_path = {events_path}\n")
        result = _invoke(config_path, "status")
        assert result.exit_code == 0, result.output
        assert "birthday" in result.output
        assert "transit" in result.output

    def test_missing_events_file(self, config_path, tmp_path):
        config_path.write_text(f"[daybook]\nevents_path = {tmp_path / 'none.json'}\n")
        result = _invoke(config_path, "status")
        assert result.exit_code == 0
        assert "No events file yet" in result.output


class TestUnreadableEvents:
    @pytest.fixture
    def non_utf8_path(self, tmp_path):
        path = tmp_path / "events.json"
        path.write_bytes(b"\xff\xfe{}")
        return path

    def test_check_on_non_utf8_file(self, config_path, non_utf8_path):
        result = _invoke(config_path, "check", "--events", str(non_utf8_path))
        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert "Error:" in result.output

    def test_check_on_directory(self, config_path, tmp_path):
        result = _invoke(config_path, "check", "--events", str(tmp_path))
        assert result.exit_code == 1
        assert not isinstance(result.exception, OSError)
        assert "Error:" in result.output

    def test_status_on_non_utf8_file(self, config_path, non_utf8_path):
        config_path.write_text(f"[daybook]\nevents_path = {non_utf8_path}\n")
        result = _invoke(config_path, "status")
        assert result.exit_code == 1
        assert not isinstance(result.exception, UnicodeDecodeError)
        assert "Error:" in result.output

    def test_status_on_directory(self, config_path, tmp_path):
        config_path.write_text(f"[daybook]\nevents_path = {tmp_path}\n")
        result = _invoke(config_path, "status")
        assert result.exit_code == 1
        assert not isinstance(result.exception, OSError)
        assert "Error:" in result.output


class TestConfigKeepGoing:
    def _add_bad_entry(self, events_path):
        data = json.loads(events_path.read_text())
        data["9999-12-31+1"] = [{"birthday": "Nobody"}]
        events_path.write_text(json.dumps(data))

    @pytest.mark.parametrize("value", ["yes", "True", "on", "1"])
    def test_truthy_values_enable_keep_going(self, config_path, events_path, tmp_path, value):
        self._add_bad_entry(events_path)
        site = tmp_path / "site"
        config_path.write_text(f"[daybook]\nkeep_going = {value}\n")
        result = _invoke(
            config_path,
            "build",
            "-e",
            str(events_path),
            "-o",
            str(site),
            "--today",
            "2023-06-10",
            "-y",
        )
        assert result.exit_code == 1
        assert (site / "2024" / "05" / "18" / "index.html").exists()

    def test_unrecognised_value_is_rejected(self, config_path, events_path, tmp_path):
        config_path.write_text("[daybook]\nkeep_going = maybe\n")
        result = _invoke(
            config_path, "build", "-e", str(events_path), "-o", str(tmp_path / "site"), "-y"
        )
        assert result.exit_code == 1
        assert "Invalid keep_going value" in result.output
        assert not (tmp_path / "site").exists()


def test_expand_rejects_negative_limit(config_path):
    result = _invoke(config_path, "expand", "2020-06-15+10", "--limit", "-1")
    assert result.exit_code == 2
    assert "2020-06-15" not in result.output
