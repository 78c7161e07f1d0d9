"""
Configuration management for ShowPlanner.

Loads and validates TOML config against strict bounds.
All tunable parameters are bounded and validated at startup.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Any, Optional
import toml
import logging

logger = logging.getLogger(__name__)

SHOW_CREATION_MODES = ("duration", "count")


class ConfigError(Exception):
    """Raised when config validation fails."""
    pass


@dataclass(frozen=True)
class AppSettings:
    """Show creation settings read by the playlist builder."""

    target_song_minutes_per_hour: int = 52
    show_creation_mode: str = "duration"
    target_songs_per_hour: int = 12

    BOUNDS = {
        "target_song_minutes_per_hour": (10, 60),
        "target_songs_per_hour": (1, 20),
    }

    def __post_init__(self):
        for name, (min_val, max_val) in self.BOUNDS.items():
            value = getattr(self, name)
            if not isinstance(value, int) or not (min_val <= value <= max_val):
                raise ConfigError(f"Setting {name}={value} out of bounds [{min_val}, {max_val}]")
        if self.show_creation_mode not in SHOW_CREATION_MODES:
            raise ConfigError(
                f"Setting show_creation_mode={self.show_creation_mode!r} "
                f"must be one of {SHOW_CREATION_MODES}"
            )

    def updated(self, **changes: Any) -> "AppSettings":
        """Return validated settings with the given fields changed."""
        unknown = set(changes) - {"target_song_minutes_per_hour", "show_creation_mode", "target_songs_per_hour"}
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_song_minutes_per_hour": self.target_song_minutes_per_hour,
            "show_creation_mode": self.show_creation_mode,
            "target_songs_per_hour": self.target_songs_per_hour,
        }


class Config:
    """Configuration loader and validator."""

    PARAM_BOUNDS = {
        "show": {
            "target_song_minutes_per_hour": (10, 60),
            "target_songs_per_hour": (1, 20),
            "show_creation_mode": SHOW_CREATION_MODES,
            "default_hours": (1, 24),
        },
        "database": {
            "path": None,
        },
        "library": {
            "music_dir": None,
        },
    }

    DEFAULT_CONFIG = {
        "config_version": "1.0",
        "show": {
            "target_song_minutes_per_hour": 52,
            "target_songs_per_hour": 12,
            "show_creation_mode": "duration",
            "default_hours": 1,
        },
        "database": {
            "path": "data/db/showplanner.sqlite",
        },
        "library": {
            "music_dir": "data/music",
        },
    }

    def __init__(self, config_dict: Dict[str, Any]):
        """Initialize config from dictionary."""
        self.data = config_dict
        self._validate()

    @classmethod
    def defaults(cls) -> "Config":
        """Config built from DEFAULT_CONFIG alone."""
        return cls({k: (dict(v) if isinstance(v, dict) else v) for k, v in cls.DEFAULT_CONFIG.items()})

    @classmethod
    def load(cls, config_path: Optional[str] = None) -> "Config":
        """
        Load config from TOML file.

        Args:
            config_path: Path to showplanner.toml. If None, uses SHOWPLANNER_CONFIG_PATH
                        env var or defaults to configs/showplanner.toml.

        Returns:
            Config instance.

        Raises:
            ConfigError: If config is invalid or unreadable.
        """
        if config_path is None:
            config_path = os.getenv("SHOWPLANNER_CONFIG_PATH", "configs/showplanner.toml")

        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}. Using defaults.")
            return cls.defaults()

        try:
            config_dict = toml.load(config_path)
        except (OSError, toml.TomlDecodeError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}")

        logger.info(f"Loaded config from {config_path}")
        return cls(config_dict)

    def _validate(self) -> None:
        """
        Validate all config parameters against PARAM_BOUNDS.

        Raises:
            ConfigError: If any parameter is out of bounds.
        """
        for section, params in self.PARAM_BOUNDS.items():
            if section not in self.data:
                logger.warning(f"Missing config section: {section}. Using defaults.")
                self.data[section] = dict(self.DEFAULT_CONFIG.get(section, {}))
                continue

            section_data = self.data[section]

            for param, bounds in params.items():
                if param not in section_data:
                    default_val = self.DEFAULT_CONFIG.get(section, {}).get(param)
                    if default_val is not None:
                        logger.warning(f"Missing param {section}.{param}. Using default: {default_val}")
                        section_data[param] = default_val
                    continue

                value = section_data[param]

                # Free-form values (paths)
                if bounds is None:
                    continue

                # Numeric ranges
                if len(bounds) == 2 and all(isinstance(b, int) for b in bounds):
                    min_val, max_val = bounds
                    if not isinstance(value, int) or not (min_val <= value <= max_val):
                        raise ConfigError(
                            f"Parameter {section}.{param}={value} out of bounds "
                            f"[{min_val}, {max_val}]"
                        )
                # Enumerated choices
                elif value not in bounds:
                    raise ConfigError(
                        f"Parameter {section}.{param}={value!r} must be one of {bounds}"
                    )

        logger.info("✅ Config validation passed")

    def get(self, section: str, param: str, default: Any = None) -> Any:
        """Get a config parameter safely."""
        return self.data.get(section, {}).get(param, default)

    def app_settings(self) -> AppSettings:
        """Build AppSettings from the [show] section."""
        show = self["show"]
        return AppSettings(
            target_song_minutes_per_hour=show["target_song_minutes_per_hour"],
            show_creation_mode=show["show_creation_mode"],
            target_songs_per_hour=show["target_songs_per_hour"],
        )

    def __getitem__(self, section: str) -> Dict[str, Any]:
        """Allow dict-like access: config["show"]"""
        return self.data.get(section, {})

    def __repr__(self) -> str:
        version = self.data.get('config_version', 'unknown')
        return f"Config(version={version})"
