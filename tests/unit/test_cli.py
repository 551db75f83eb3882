"""Tests for the pay-sheet CLI.

Uses click's CliRunner with the config and data directories isolated by
tests/conftest.py. Nothing is sent: email commands run with --dry-run.
"""

import json
import pytest
import yaml
from click.testing import CliRunner

from paysheet.cli.__main__ import cli


PROFILE = {
    "employee": {"name": "Jane Doe", "email": "jane@example.com"},
    "recipients": {"to": ["payroll@example.com"]},
    "smtp": {"host": "smtp.example.com", "port": 587},
    "timezone": "America/Vancouver",
}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def profile_file(isolated_dirs):
    path = isolated_dirs["config_dir"] / "profile.yaml"
    path.write_text(yaml.dump(PROFILE))
    return path


class TestPeriodsCommands:
    def test_resolve_json(self, runner):
        result = runner.invoke(cli, ["periods", "resolve", "2024", "10", "1", "15", "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data == {
            "pay_period_label": "10/01/2024 - 10/15/2024",
            "pay_date": "2024-10-15",
            "email_date": "2024-10-10T10:00:00-07:00",
            "reminder_date": "2024-10-09",
            "holiday_rule": "Thanksgiving",
        }

    def test_resolve_text(self, runner):
        result = runner.invoke(cli, ["periods", "resolve", "2025", "4", "1", "15"])
        assert result.exit_code == 0, result.output
        assert "04/01/2025 - 04/15/2025" in result.output
        assert "Good Friday (April)" in result.output

    def test_resolve_invalid_period(self, runner):
        result = runner.invoke(cli, ["periods", "resolve", "2023", "2", "16", "29"])
        assert result.exit_code != 0
        assert "outside" in result.output

    def test_show_json(self, runner):
        result = runner.invoke(cli, ["periods", "show", "2024-02-20", "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data["period"]["label"] == "02/16/2024 - 02/29/2024"
        assert data["dates"]["pay_date"] == "2024-02-29"
        assert data["holiday_rule"] is None

    def test_show_bad_date(self, runner):
        result = runner.invoke(cli, ["periods", "show", "20/02/2024"])
        assert result.exit_code != 0
        assert "YYYY-MM-DD" in result.output

    def test_list_json(self, runner):
        result = runner.invoke(cli, ["periods", "list", "2024", "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert len(data) == 24
        rules = [row["holiday_rule"] for row in data if row["holiday_rule"]]
        assert rules == ["Family Day", "Good Friday (March)", "Thanksgiving", "Remembrance Day"]

    def test_timezone_setting_used(self, runner):
        runner.invoke(cli, ["settings", "timezone", "America/Toronto"])
        result = runner.invoke(cli, ["periods", "resolve", "2024", "10", "1", "15", "--format", "json"])
        assert json.loads(result.output)["email_date"] == "2024-10-10T10:00:00-04:00"


class TestHolidaysCommand:
    def test_json(self, runner):
        result = runner.invoke(cli, ["holidays", "2025", "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert len(data) == 10
        assert data[2] == {"name": "Good Friday", "observed_date": "2025-04-18", "day_of_week": "Friday"}

    def test_text(self, runner):
        result = runner.invoke(cli, ["holidays", "2024"])
        assert result.exit_code == 0, result.output
        assert "Thanksgiving" in result.output
        assert "2024-10-14" in result.output


class TestScheduleCommands:
    def test_show_json(self, runner):
        result = runner.invoke(cli, ["schedule", "show", "2024-10-03", "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert [job["id"] for job in data] == [
            "reminder:2024-10-09",
            "submission:2024-10-10",
            "replan:2024-10-16",
        ]


class TestTimesheetCommands:
    def test_render_json(self, runner, profile_file, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(cli, ["timesheet", "render", "2024-10-03", "-o", str(out), "--format", "json"])
        assert result.exit_code == 0, result.output

        data = json.loads(result.output)
        assert data["totals"]["total_hours"] == 82.5
        assert (out / "timesheet_2024-10-01_2024-10-15.pdf").exists()
        assert (out / "timesheet_2024-10-01_2024-10-15.xlsx").exists()

    def test_render_without_profile(self, runner, tmp_path):
        result = runner.invoke(cli, ["timesheet", "render", "2024-10-03", "-o", str(tmp_path)])
        assert result.exit_code != 0
        assert "No profile found" in result.output

    def test_render_profile_not_ready(self, runner, isolated_dirs, tmp_path):
        (isolated_dirs["config_dir"] / "profile.yaml").write_text(yaml.dump({"timezone": "America/Vancouver"}))
        result = runner.invoke(cli, ["timesheet", "render", "2024-10-03", "-o", str(tmp_path)])
        assert result.exit_code != 0
        assert "employee.name" in result.output

    def test_send_dry_run(self, runner, profile_file, tmp_path):
        out = tmp_path / "out"
        result = runner.invoke(cli, ["timesheet", "send", "2024-10-03", "-o", str(out), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "Written to outbox: timesheet 10/01/2024 - 10/15/2024" in result.output
        assert (out / "outbox" / "message_001.eml").exists()

    def test_remind_dry_run(self, runner, profile_file):
        result = runner.invoke(cli, ["remind", "2024-10-03", "--dry-run"])
        assert result.exit_code == 0, result.output
        assert "Reminder: timesheet for 10/01/2024 - 10/15/2024 is due" in result.output
        assert "To: jane@example.com" in result.output


class TestProfileCommands:
    def test_show_missing(self, runner):
        result = runner.invoke(cli, ["profile", "show"])
        assert result.exit_code == 0
        assert "not created" in result.output

    def test_init_then_show(self, runner):
        result = runner.invoke(cli, ["profile", "init"])
        assert result.exit_code == 0, result.output
        assert "Created:" in result.output

        result = runner.invoke(cli, ["profile", "show"])
        assert result.exit_code == 0, result.output
        assert "Feature readiness" in result.output
        assert result.output.count("Ready (") == 2

    def test_init_refuses_overwrite(self, runner, profile_file):
        result = runner.invoke(cli, ["profile", "init"])
        assert result.exit_code != 0
        assert "already exists" in result.output

    def test_set_and_get(self, runner, profile_file):
        result = runner.invoke(cli, ["profile", "set", "recipients.to", "a@example.com,b@example.com"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(cli, ["profile", "get", "recipients.to"])
        assert result.output.strip() == "a@example.com, b@example.com"

    def test_set_unknown_key(self, runner, profile_file):
        result = runner.invoke(cli, ["profile", "set", "smtp.server", "x"])
        assert result.exit_code != 0
        assert "Unknown key 'server'" in result.output

    def test_set_bad_int(self, runner, profile_file):
        result = runner.invoke(cli, ["profile", "set", "smtp.port", "lots"])
        assert result.exit_code != 0
        assert "Invalid value" in result.output

    def test_use_external_profile(self, runner, tmp_path):
        external = tmp_path / "shared.yaml"
        external.write_text(yaml.dump(PROFILE))
        result = runner.invoke(cli, ["profile", "use", str(external)])
        assert result.exit_code == 0, result.output
        assert "Active profile set to" in result.output

        result = runner.invoke(cli, ["profile", "get", "employee.name"])
        assert result.output.strip() == "Jane Doe"

    def test_use_rejects_invalid_profile(self, runner, tmp_path):
        external = tmp_path / "bad.yaml"
        external.write_text(yaml.dump({"timezone": "Nowhere/Special"}))
        result = runner.invoke(cli, ["profile", "use", str(external)])
        assert result.exit_code != 0
        assert "validation errors" in result.output


class TestSettingsCommands:
    def test_timezone_invalid(self, runner):
        result = runner.invoke(cli, ["settings", "timezone", "Mars/Base"])
        assert result.exit_code != 0
        assert "Unknown timezone" in result.output

    def test_data_dir(self, runner, tmp_path):
        target = tmp_path / "sheets"
        result = runner.invoke(cli, ["settings", "data-dir", str(target)])
        assert result.exit_code == 0, result.output
        assert target.is_dir()

        result = runner.invoke(cli, ["settings", "show"])
        assert f"data_dir: {target.resolve()}" in result.output

    def test_data_dir_clear(self, runner, isolated_dirs, tmp_path):
        runner.invoke(cli, ["settings", "data-dir", str(tmp_path / "sheets")])
        result = runner.invoke(cli, ["settings", "data-dir", "--clear"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("Cleared")
        assert "data_dir" not in json.loads((isolated_dirs["config_dir"] / "settings.json").read_text())

    def test_data_dir_rejects_file(self, runner, tmp_path):
        target = tmp_path / "plain.txt"
        target.write_text("x")
        result = runner.invoke(cli, ["settings", "data-dir", str(target)])
        assert result.exit_code != 0

    def test_timezone_clear(self, runner):
        runner.invoke(cli, ["settings", "timezone", "America/Toronto"])
        result = runner.invoke(cli, ["settings", "timezone", "--clear"])
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "timezone = America/Vancouver"

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "pay-sheet" in result.output
