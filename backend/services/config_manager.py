"""
Configuration Manager - Handle backend settings persistence
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class ConfigManager:
    """Manage configuration persistence"""

    _instance = None
    _config_file = None

    def __init__(self):
        try:
            # 1. Environment variable
            config_dir = os.environ.get("ARTIFACT_DIFF_CONFIG_DIR")

            # 2. Home directory ~/.artifact_diff
            if not config_dir:
                config_dir = os.path.expanduser("~/.artifact_diff")

            config_path = Path(config_dir)
            try:
                config_path.mkdir(parents=True, exist_ok=True)
                self._config_file = config_path / "config.json"
            except OSError as e:
                logger.warning("Cannot write to %s: %s", config_dir, e)
                self._config_file = None

            # 3. Fall back to the temp directory
            if not self._config_file:
                tmp_dir = Path(tempfile.gettempdir()) / "artifact_diff"
                tmp_dir.mkdir(parents=True, exist_ok=True)
                self._config_file = tmp_dir / "config.json"
                logger.info("Using temporary config path: %s", self._config_file)

        except OSError as e:
            logger.error("Cannot prepare config directory: %s", e)
            self._config_file = Path(tempfile.gettempdir()) / "artifact_diff_config_fallback.json"

        self._config = self._load_config()

    @classmethod
    def get_instance(cls) -> "ConfigManager":
        """Get singleton instance"""
        if cls._instance is None:
            cls._instance = ConfigManager()
        return cls._instance

    @classmethod
    def reset_instance(cls):
        """Drop the singleton so the next get_instance() re-reads the environment"""
        cls._instance = None

    @property
    def config_dir(self) -> Path:
        return self._config_file.parent

    def _load_config(self) -> dict[str, Any]:
        """Load configuration from file"""
        if not self._config_file.exists():
            return self._default_config()

        try:
            with open(self._config_file) as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Error loading config %s: %s", self._config_file, e)
            return self._default_config()

    def _default_config(self) -> dict[str, Any]:
        """Get default configuration"""
        return {
            "cache": {
                "backend": "sqlite",
                "path": str(self.config_dir / "diff_cache.db"),
                "maxEntriesPerSession": 50,
                "evictionBatch": 10,
                "maxBytes": None,
            },
            "diff": {"contextLines": 3},
            "server": {"host": "127.0.0.1", "port": 8000},
        }

    def get_config(self) -> dict[str, Any]:
        """Get current configuration"""
        # Reload config from file to ensure we have the latest
        self._config = self._load_config()
        return self._config.copy()

    def save_config(self, config: dict[str, Any]):
        """Save configuration to file"""
        # Merge with existing config
        self._config.update(config)

        # Ensure config directory exists
        self._config_file.parent.mkdir(parents=True, exist_ok=True)

        # Write to file
        try:
            with open(self._config_file, "w") as f:
                json.dump(self._config, f, indent=2)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}")

    def get(self, key: str, default=None):
        """Get specific config value"""
        return self._config.get(key, default)

    def set(self, key: str, value: Any):
        """Set specific config value"""
        self._config[key] = value
        self.save_config(self._config)

    def _section(self, name: str) -> dict[str, Any]:
        section = dict(self._default_config()[name])
        section.update(self._config.get(name) or {})
        return section

    def cache_settings(self) -> dict[str, Any]:
        """Cache settings with defaults filled in"""
        return self._section("cache")

    def diff_settings(self) -> dict[str, Any]:
        """Diff settings with defaults filled in"""
        return self._section("diff")
