"""
Configuration management for Grant Audit.

Loads configuration from config.yaml, .env file, and environment variables.
Priority: Environment variables > .env file > config.yaml
"""

import os
from pathlib import Path
from typing import Any

import yaml

DEFAULT_API_URL = "https://albertaspends-com.onrender.com"


# Load .env file if it exists (before reading os.environ)
def _load_dotenv():
    """Load .env file from project root."""
    current = Path.cwd()
    for path in [current] + list(current.parents):
        env_path = path / ".env"
        if env_path.exists():
            with open(env_path) as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, _, value = line.partition("=")
                        key = key.strip()
                        value = value.strip().strip('"').strip("'")
                        # Only set if not already in environment
                        if key not in os.environ:
                            os.environ[key] = value
            break

_load_dotenv()


class Config:
    """Application configuration singleton."""

    _instance = None
    _config: dict = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._load_config()
        return cls._instance

    def _find_config_file(self) -> Path | None:
        """Find config.yaml in current directory or parent directories."""
        current = Path.cwd()
        for path in [current] + list(current.parents):
            config_path = path / "config.yaml"
            if config_path.exists():
                return config_path
        return None

    def _load_config(self) -> None:
        """Load configuration from file and environment."""
        config_path = self._find_config_file()

        if config_path:
            with open(config_path) as f:
                self._config = yaml.safe_load(f) or {}
        else:
            self._config = {}

        self._apply_env_overrides()

    def _apply_env_overrides(self) -> None:
        """Override config values with environment variables."""
        env_mappings = {
            "GRANTAUDIT_API_URL": ("api", "base_url"),
            "GRANTAUDIT_API_TIMEOUT": ("api", "timeout"),
            "GRANTAUDIT_DATA_FILE": ("data", "data_file"),
            "GRANTAUDIT_EXPORT_DIR": ("data", "export_dir"),
        }

        for env_var, path in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                self._set_nested(path, value)

    def _set_nested(self, path: tuple, value: Any) -> None:
        """Set a nested config value."""
        current = self._config
        for key in path[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        if path[-1] == "timeout":
            value = float(value)

        current[path[-1]] = value

    def _get_nested(self, path: tuple, default: Any = None) -> Any:
        """Get a nested config value."""
        current = self._config
        for key in path:
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
        return current

    @property
    def api_base_url(self) -> str:
        """Get the grants API base URL."""
        return self._get_nested(("api", "base_url"), DEFAULT_API_URL).rstrip("/")

    @property
    def api_timeout(self) -> float:
        """Get the API request timeout in seconds."""
        return float(self._get_nested(("api", "timeout"), 30))

    @property
    def data_file(self) -> Path | None:
        """Get the grant dataset path, if one is configured."""
        value = self._get_nested(("data", "data_file"))
        return Path(value) if value else None

    @property
    def export_dir(self) -> Path:
        """Get the directory CSV exports are written to."""
        return Path(self._get_nested(("data", "export_dir"), "."))

    @property
    def detection_thresholds(self) -> dict:
        """Get risk detection thresholds."""
        return self._get_nested(("detection", "thresholds"), {}) or {}

    @property
    def criteria_overrides(self) -> dict:
        """Get flagging criteria enabled/disabled overrides, keyed by criterion id."""
        return self._get_nested(("detection", "criteria"), {}) or {}

    @property
    def consolidation_threshold(self) -> float:
        """Get the minimum share a ministry needs to avoid the 'Other' bucket."""
        return float(self._get_nested(("dashboard", "consolidation_threshold"), 0.02))

    def reload(self) -> None:
        """Reload configuration from file."""
        self._load_config()

    def get(self, *path: str, default: Any = None) -> Any:
        """Get a config value by path."""
        return self._get_nested(path, default)


# Global config instance
config = Config()
