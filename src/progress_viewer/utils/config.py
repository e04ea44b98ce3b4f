"""Configuration management."""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Any, Optional

from ..core.errors import ConfigError
from ..ui.text_reporter import (
    TextReporter, LEGEND_DEFAULT, LEGEND_PROGRESS_BAR,
    DEFAULT_FLOAT_PRECISION, DEFAULT_PROGRESS_BAR_WIDTH
)

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PROGRESS_VIEWER_CONFIG"

LEGEND_ALIASES = {
    "default": LEGEND_DEFAULT,
    "progress_bar": LEGEND_PROGRESS_BAR,
}


class Config:
    """Application configuration manager."""

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to configuration file
        """
        env_file = os.getenv(CONFIG_ENV_VAR)
        self.config_file = Path(config_file or env_file or "progress_viewer.json")
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        self._config = self._get_default_config()
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    self._config.update(json.load(f))
            except (json.JSONDecodeError, IOError) as e:
                logger.warning(f"Ignoring unreadable config file {self.config_file}: {e}")

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "report_interval": 1.0,
            "legend": "default",
            "float_precision": DEFAULT_FLOAT_PRECISION,
            "progress_bar_width": DEFAULT_PROGRESS_BAR_WIDTH
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            Configuration value
        """
        return self._config.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set configuration value.

        Args:
            key: Configuration key
            value: Configuration value
        """
        self._config[key] = value

    @property
    def report_interval(self) -> float:
        """Report interval in seconds.

        Raises:
            ConfigError: If the value is not a positive number
        """
        value = self.get("report_interval")
        try:
            interval = float(value)
        except (TypeError, ValueError):
            raise ConfigError(f"report_interval must be a number, got {value!r}")
        if interval <= 0:
            raise ConfigError(f"report_interval must be positive, got {interval}")
        return interval

    @property
    def legend(self) -> str:
        """Legend template, resolving the built-in aliases."""
        legend = self.get("legend", "default")
        return LEGEND_ALIASES.get(legend, legend)

    def build_reporter(self) -> TextReporter:
        """Build a text reporter from the configured values.

        Raises:
            ConfigError: If a numeric setting is invalid
        """
        try:
            precision = int(self.get("float_precision"))
            width = int(self.get("progress_bar_width"))
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid reporter setting: {e}")
        if precision < 0:
            raise ConfigError(f"float_precision must be non-negative, got {precision}")

        return (
            TextReporter()
            .with_legend(self.legend)
            .with_float_precision(precision)
            .with_progress_bar_width(width)
        )

    def save(self) -> None:
        """Save configuration to file."""
        with open(self.config_file, 'w') as f:
            json.dump(self._config, f, indent=2)
