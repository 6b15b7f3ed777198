# ==============================================================================
# Tests for Settings
# ==============================================================================
"""
Unit tests for environment-driven configuration.
"""

from zoneinfo import ZoneInfo

import pytest
from pydantic import ValidationError

from timecard.core.models import Weekday
from timecard.utils.config import DATA_FILE_NAME, ReportSettings, Settings, load_timezone


class TestSettings:
    """Tests for Settings and ReportSettings."""

    def test_data_file_in_folder(self, data_folder):
        settings = Settings()
        assert settings.data_file == data_folder / DATA_FILE_NAME

    def test_default_data_folder_uses_xdg(self, monkeypatch, tmp_path):
        monkeypatch.delenv("TIMECARD_DATA_FOLDER", raising=False)
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
        assert Settings().data_folder_path == tmp_path / "timecard"

    def test_timezone_from_env(self, monkeypatch):
        monkeypatch.setenv("TIMECARD_TIMEZONE", "America/Los_Angeles")
        assert Settings().get_timezone() == ZoneInfo("America/Los_Angeles")

    def test_timezone_falls_back_to_tz(self, monkeypatch):
        monkeypatch.delenv("TIMECARD_TIMEZONE", raising=False)
        monkeypatch.setenv("TZ", "Europe/Berlin")
        assert Settings().timezone_name == "Europe/Berlin"

    def test_unknown_timezone(self):
        with pytest.raises(ValueError, match="not recognised"):
            load_timezone("Mars/Olympus_Mons")

    def test_report_defaults(self, monkeypatch):
        for name in ("ROWS", "WEEK_START", "EXACT_DURATIONS"):
            monkeypatch.delenv(f"TIMECARD_REPORT_{name}", raising=False)
        report = ReportSettings()
        assert report.rows == 10
        assert report.week_start == Weekday.MONDAY
        assert report.exact_durations is False

    @pytest.mark.parametrize(
        "value, expected",
        [("sunday", Weekday.SUNDAY), ("Tue", Weekday.TUESDAY), ("6", Weekday.SUNDAY)],
    )
    def test_week_start_spellings(self, monkeypatch, value, expected):
        monkeypatch.setenv("TIMECARD_REPORT_WEEK_START", value)
        assert ReportSettings().week_start == expected

    def test_zero_rows_rejected(self, monkeypatch):
        monkeypatch.setenv("TIMECARD_REPORT_ROWS", "0")
        with pytest.raises(ValidationError):
            ReportSettings()
