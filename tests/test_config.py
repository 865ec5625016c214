"""Tests for configuration sections."""

import pytest

from src.core.config import Config


class TestConfig:
    def test_calculator_defaults(self):
        cfg = Config()
        assert cfg.get_section("calculator")["guideline_min_age_hours"] == 24
        assert cfg.get_section("calculator")["escalation_offset"] == 2.0

    def test_bilirubin_field_range(self):
        limits = Config().get_section("input")["bilirubin"]
        assert (limits["min"], limits["max"], limits["step"]) == (1.0, 28.0, 0.1)
        assert limits["start_value"] == 8.0

    def test_hour_field_range(self):
        limits = Config().get_section("input")["hour"]
        assert (limits["min"], limits["max"], limits["is_float"]) == (0, 23, False)

    def test_unknown_section_is_empty(self):
        assert Config().get_section("rppg") == {}

    def test_update_config(self):
        cfg = Config()
        cfg.update_config("calculator", {"escalation_offset": 3.0})
        assert cfg.calculator_config["escalation_offset"] == 3.0

    def test_update_unknown_section(self):
        with pytest.raises(ValueError):
            Config().update_config("fusion", {})
