"""Configuration management for FingerStrings."""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .dates import WEEKDAYS

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "~/.finger_strings.yaml"


@dataclass
class ConfigModel:
    """Settings for one FingerStrings session."""

    # File paths
    todo_file: str = "~/.finger_strings"
    history_file: str = "~/.finger_strings.history"

    # Display preferences
    min_width: int = 80
    no_color: bool = False

    # Deferral behaviour
    defer_weekday: str = "mon"
    long_defer_days: int = 30

    def __post_init__(self):
        """Expand user paths and validate settings."""
        self.todo_file = os.path.expanduser(str(self.todo_file))
        self.history_file = os.path.expanduser(str(self.history_file))

        self.defer_weekday = str(self.defer_weekday).lower()
        if self.defer_weekday not in WEEKDAYS:
            raise ValueError(f"defer_weekday must be one of {', '.join(WEEKDAYS)}")
        self.min_width = int(self.min_width)
        self.long_defer_days = int(self.long_defer_days)
        if self.long_defer_days < 1:
            raise ValueError("long_defer_days must be positive")

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        data = {
            "todo_file": self.todo_file,
            "history_file": self.history_file,
            "min_width": self.min_width,
            "no_color": self.no_color,
            "defer_weekday": self.defer_weekday,
            "long_defer_days": self.long_defer_days,
        }
        return yaml.dump(data, default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ValueError("configuration must be a mapping")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(sorted(unknown))}")

        return cls(**{key: value for key, value in data.items() if key in known})

    def get_todo_path(self) -> Path:
        return Path(self.todo_file)

    def get_history_path(self) -> Path:
        return Path(self.history_file)


def get_config_path() -> Path:
    """Get the default config file path."""
    return Path(os.path.expanduser(DEFAULT_CONFIG_PATH))


def load_config(config_path: Optional[Path] = None) -> ConfigModel:
    """Load configuration from file, or defaults if there is none.

    A config file that cannot be read or parsed is reported and the
    defaults are used instead.
    """
    if config_path is None:
        config_path = get_config_path()
    config_path = Path(config_path)

    if not config_path.exists():
        logger.debug(f"No config file at {config_path}, using defaults")
        return ConfigModel()

    try:
        config = ConfigModel.from_yaml(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError, TypeError, ValueError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}. Using defaults.")
        return ConfigModel()

    logger.debug(f"Loaded configuration from {config_path}")
    return config


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> None:
    """Save configuration to file."""
    if config_path is None:
        config_path = get_config_path()
    config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(config.to_yaml(), encoding="utf-8")
    logger.info(f"Configuration saved to {config_path}")
