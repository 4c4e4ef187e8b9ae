"""Tests for the CLI."""

from unittest.mock import patch

from click.testing import CliRunner

from tardis.adapters.settings_store import SettingsStore
from tardis.cli import main


class TestSelect:
    def test_adds_calendars(self, tmp_path):
        state = tmp_path / "state.json"
        with patch("tardis.cli.STATE_FILE", state):
            result = CliRunner().invoke(main, ["select", "Daily=daily", "Doctor=Medical"])

        assert result.exit_code == 0
        assert SettingsStore(state).get_selected_calendars() == {"Daily": "daily", "Doctor": "medical"}

    def test_keeps_existing_unless_cleared(self, tmp_path):
        state = tmp_path / "state.json"
        SettingsStore(state).set_selected_calendars({"Meals": "meals"})

        with patch("tardis.cli.STATE_FILE", state):
            CliRunner().invoke(main, ["select", "Daily=daily"])
            assert SettingsStore(state).get_selected_calendars() == {"Meals": "meals", "Daily": "daily"}

            CliRunner().invoke(main, ["select", "--clear", "Daily=daily"])
            assert SettingsStore(state).get_selected_calendars() == {"Daily": "daily"}

    def test_clear_everything(self, tmp_path):
        state = tmp_path / "state.json"
        SettingsStore(state).set_selected_calendars({"Meals": "meals"})
        with patch("tardis.cli.STATE_FILE", state):
            result = CliRunner().invoke(main, ["select", "--clear"])
        assert "No calendars selected." in result.output
        assert SettingsStore(state).get_selected_calendars() == {}

    def test_rejects_unknown_type(self, tmp_path):
        state = tmp_path / "state.json"
        with patch("tardis.cli.STATE_FILE", state):
            result = CliRunner().invoke(main, ["select", "Daily=chores"])
        assert result.exit_code == 1
        assert not state.exists()

    def test_rejects_malformed_assignment(self, tmp_path):
        with patch("tardis.cli.STATE_FILE", tmp_path / "state.json"):
            result = CliRunner().invoke(main, ["select", "Daily"])
        assert result.exit_code == 1
