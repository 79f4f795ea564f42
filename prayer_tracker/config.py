# Prayer Tracker - configuration
# Override paths and behavior via config.yaml or CLI args.

import logging
import os
import yaml
from pathlib import Path
from dataclasses import dataclass, fields
from typing import Optional

from .backends import DEFAULT_DATA_PATH
from .store import STORAGE_KEY
from .views import SUNDAY, WEEKDAYS

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".config" / "prayer-tracker" / "config.yaml"
CONFIG_ENV = "PRAYER_TRACKER_CONFIG"


class ConfigError(Exception):
    """Raised when an explicitly requested config file cannot be used."""
    pass


@dataclass
class Config:
    """Runtime configuration for the prayer tracker."""

    # Storage
    data_path: str = str(DEFAULT_DATA_PATH)
    storage_key: str = STORAGE_KEY

    # Views: first day of the "this week" window
    week_start: str = "sunday"

    # Logging
    log_level: str = "WARNING"

    def resolve(self):
        """Expand ~ and normalize values that came from YAML."""
        self.data_path = str(Path(self.data_path).expanduser())

        self.week_start = str(self.week_start).strip().lower()
        if self.week_start not in WEEKDAYS:
            logger.warning(f"Unknown week_start '{self.week_start}', using sunday")
            self.week_start = "sunday"

        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            logger.warning(f"Unknown log_level '{self.log_level}', using WARNING")
            self.log_level = "WARNING"

    @property
    def first_weekday(self) -> int:
        return WEEKDAYS.get(self.week_start, SUNDAY)

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """
        Load config from YAML, falling back to defaults.

        An explicit path (argument or PRAYER_TRACKER_CONFIG) that does not
        exist raises ConfigError; a missing default file is fine.
        """
        explicit = path or os.environ.get(CONFIG_ENV)
        cfg_path = Path(explicit).expanduser() if explicit else CONFIG_PATH

        if not cfg_path.exists():
            if explicit:
                raise ConfigError(f"Config file not found: {cfg_path}")
            cfg = cls()
        else:
            try:
                with open(cfg_path, "r") as f:
                    data = yaml.safe_load(f) or {}
                known = {fld.name for fld in fields(cls)}
                cfg = cls(**{k: v for k, v in data.items() if k in known})
            except (yaml.YAMLError, OSError, AttributeError, TypeError) as e:
                logger.warning(f"Could not read {cfg_path}, using defaults: {e}")
                cfg = cls()
        cfg.resolve()
        return cfg
