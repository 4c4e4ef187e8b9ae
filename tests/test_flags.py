"""Tests for state flag derivation."""

from datetime import datetime, timedelta, timezone

import pytest

from tardis.core.flags import StateInputs, compute_flags, internet_is_down, warning_message

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def healthy():
    return StateInputs(now=NOW, solar_days_available=True)


class TestInternetIsDown:
    def test_up(self, healthy):
        assert internet_is_down(healthy) is False

    def test_briefly_down_is_not_reported(self):
        inputs = StateInputs(now=NOW, network_down=True, network_down_since=NOW - timedelta(minutes=30))
        assert internet_is_down(inputs) is False

    def test_down_past_debounce(self):
        inputs = StateInputs(now=NOW, network_down=True, network_down_since=NOW - timedelta(hours=2))
        assert internet_is_down(inputs) is True

    def test_down_without_timestamp_counts_as_just_now(self):
        inputs = StateInputs(now=NOW, network_down=True)
        assert internet_is_down(inputs) is False

    def test_stale_timestamp_ignored_once_back_up(self):
        inputs = StateInputs(now=NOW, network_down=False, network_down_since=NOW - timedelta(days=1))
        assert internet_is_down(inputs) is False


class TestComputeFlags:
    def test_healthy_shows_no_warning(self, healthy):
        flags = compute_flags(healthy)
        assert flags.show_warning is False
        assert flags.solar_days_available is True
        assert warning_message(flags) is None

    @pytest.mark.parametrize(
        "changes",
        [
            {"calendar_permission_denied": True},
            {"calendars_available": False},
            {"calendars_selected": False},
            {"network_down": True, "network_down_since": NOW - timedelta(hours=3)},
            {"location_authorized": False},
            {"missing_solar_days": 4},
        ],
    )
    def test_each_condition_triggers_warning(self, changes):
        flags = compute_flags(StateInputs(now=NOW, **changes))
        assert flags.show_warning is True
        assert warning_message(flags)

    def test_few_missing_solar_days_tolerated(self):
        flags = compute_flags(StateInputs(now=NOW, missing_solar_days=3))
        assert flags.show_missing_solar_days_warning is False
        assert flags.show_warning is False

    def test_first_run_opens_settings(self):
        assert compute_flags(StateInputs(now=NOW, first_run=True)).show_settings is True

    def test_pure(self, healthy):
        assert compute_flags(healthy) == compute_flags(healthy)


class TestWarningMessage:
    def test_permission_takes_precedence(self):
        flags = compute_flags(
            StateInputs(now=NOW, calendar_permission_denied=True, location_authorized=False)
        )
        assert "permission" in warning_message(flags)

    def test_location(self):
        flags = compute_flags(StateInputs(now=NOW, location_authorized=False))
        assert "Location" in warning_message(flags)

    def test_missing_solar_days(self):
        flags = compute_flags(StateInputs(now=NOW, missing_solar_days=6))
        assert "sunrise" in warning_message(flags)
