"""Configuration management."""

import json
import logging
import os
from typing import Dict, Any, Optional
from pathlib import Path

# Configure logging
logger = logging.getLogger(__name__)

DATA_DIR_ENV = "FILE_NAMER_HOME"
DEFAULT_TEMPLATE = "{date}_{category}_{project}_{version}"


def get_data_dir() -> Path:
    """Return the directory holding settings, templates and the audit log.

    ``$FILE_NAMER_HOME`` wins over the default ``~/.file_namer``.
    """
    override = os.getenv(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".file_namer"


class Config:
    """Application configuration manager."""

    def __init__(self, config_file: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            config_file: Path to configuration file
        """
        self.config_file = Path(config_file) if config_file else get_data_dir() / "config.json"
        self._config: Dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file."""
        self._config = self._get_default_config()
        if not self.config_file.exists():
            return

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, IOError) as e:
            logger.warning(f"Ignoring unreadable config file {self.config_file}: {e}")
            return

        if isinstance(loaded, dict):
            self._config.update(loaded)
        else:
            logger.warning(f"Ignoring config file {self.config_file}: expected a JSON object")

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "author": "",
            "default_save_path": "",
            "naming_template": DEFAULT_TEMPLATE,
            "last_used_preset_id": ""
        }

    @property
    def author(self) -> str:
        return self._config.get("author") or ""

    @property
    def naming_template(self) -> str:
        return self._config.get("naming_template") or DEFAULT_TEMPLATE

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

    def as_dict(self) -> Dict[str, Any]:
        """Return a copy of all configuration values."""
        return dict(self._config)

    def replace(self, values: Dict[str, Any]) -> None:
        """Replace all configuration values, keeping defaults for missing keys."""
        self._config = self._get_default_config()
        self._config.update(values)

    def save(self) -> None:
        """Save configuration to file."""
        self.config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2, ensure_ascii=False)
