# src/config/config.py

import copy
import logging
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
from . import defaults

logger = logging.getLogger(__name__)


class Config:
    """Configuration manager with YAML override support."""

    def __init__(self, config_file: Optional[Path] = None):
        self.settings = self.load_defaults()

        # Auto-discovered config.yml is ignored in test mode; explicit files are always loaded
        if config_file is None and not self._is_test_mode():
            config_file = self._find_config_file()

        if config_file is not None:
            config_file = Path(config_file)
            if config_file.exists():
                self._load_yaml_config(config_file)
                logger.info(f"Loaded configuration from {config_file}")
            else:
                logger.warning(f"Config file {config_file} not found - using defaults")
        else:
            logger.debug("No config.yml found - using defaults only")

    def _find_config_file(self) -> Optional[Path]:
        """Find config.yml with multiple fallback locations."""
        project_root = Path(__file__).parent.parent.parent

        potential_locations = [
            project_root / 'config.yml',
            project_root / 'config' / 'config.yml',
            Path.cwd() / 'config.yml',
            Path.home() / '.battlegrid' / 'config.yml',
        ]

        for location in potential_locations:
            if location.exists() and location.is_file():
                return location

        return None

    def _is_test_mode(self) -> bool:
        """Detect if we're running in test mode."""
        return (
            os.environ.get('FORCE_TEST_MODE', 'false').lower() == 'true' or
            os.environ.get('PYTEST_CURRENT_TEST') is not None
        )

    def load_defaults(self) -> Dict[str, Any]:
        """Load default configuration settings."""
        return {
            'grids': copy.deepcopy(defaults.GRIDS),
            'logging': defaults.LOGGING.copy()
        }

    def _load_yaml_config(self, config_file: Path):
        """Load and merge configuration from a YAML file."""
        with open(config_file, 'r') as file:
            yaml_config = yaml.safe_load(file)
        if yaml_config is None:
            return
        if not isinstance(yaml_config, dict):
            raise ValueError(f"Config file {config_file} must contain a mapping, got: {type(yaml_config).__name__}")
        self._deep_merge(self.settings, yaml_config)

    def _deep_merge(self, base: dict, override: dict):
        """Deep merge override into base dictionary."""
        for key, value in override.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation."""
        keys = key.split(".")
        value = self.settings

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    @property
    def grids(self) -> Dict[str, Any]:
        return self.settings['grids']

    @property
    def logging(self) -> Dict[str, Any]:
        return self.settings['logging']


# Global configuration instance
config = Config()
