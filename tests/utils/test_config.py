"""Tests for configuration management."""

import json

import pytest

from progress_viewer.core.errors import ConfigError
from progress_viewer.ui.text_reporter import LEGEND_DEFAULT, LEGEND_PROGRESS_BAR, TextReporter
from progress_viewer.utils.config import Config, CONFIG_ENV_VAR


@pytest.fixture
def config_file(tmp_path):
    """Path to a not-yet-written config file."""
    return tmp_path / "progress_viewer.json"


class TestConfig:
    """Loading and saving configuration."""

    def test_defaults_when_missing(self, config_file):
        config = Config(config_file)

        assert config.report_interval == 1.0
        assert config.legend == LEGEND_DEFAULT
        assert config.get("float_precision") == 2
        assert config.get("progress_bar_width") == 80

    def test_file_values_override_defaults(self, config_file):
        config_file.write_text(json.dumps({"report_interval": 0.5, "legend": "progress_bar"}))

        config = Config(config_file)

        assert config.report_interval == 0.5
        assert config.legend == LEGEND_PROGRESS_BAR
        assert config.get("float_precision") == 2

    def test_corrupt_file_falls_back(self, config_file):
        config_file.write_text("{not json")

        config = Config(config_file)

        assert config.report_interval == 1.0

    def test_env_var_path(self, config_file, monkeypatch):
        config_file.write_text(json.dumps({"legend": "{done}"}))
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))

        assert Config().legend == "{done}"

    def test_save_round_trip(self, config_file):
        config = Config(config_file)
        config.set("report_interval", 2.5)
        config.save()

        assert Config(config_file).report_interval == 2.5

    @pytest.mark.parametrize("value", [0, -1, "fast", None])
    def test_invalid_interval(self, config_file, value):
        config = Config(config_file)
        config.set("report_interval", value)

        with pytest.raises(ConfigError):
            config.report_interval

    def test_build_reporter(self, config_file):
        config_file.write_text(json.dumps({
            "legend": "{done}",
            "float_precision": 3,
            "progress_bar_width": 20
        }))

        reporter = Config(config_file).build_reporter()

        assert isinstance(reporter, TextReporter)
        assert reporter.legend == "{done}"
        assert reporter.float_precision == 3
        assert reporter.progress_bar_width == 20

    def test_build_reporter_invalid_precision(self, config_file):
        config = Config(config_file)
        config.set("float_precision", -1)

        with pytest.raises(ConfigError):
            config.build_reporter()
