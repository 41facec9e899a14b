"""Configuration manager for loading, saving, and managing application settings."""
import json
import logging
from pathlib import Path
from typing import Optional, Dict, Any, Union
from dataclasses import asdict

from ..exceptions import ConfigurationError
from .settings import ApplicationSettings

logger = logging.getLogger(__name__)


class ConfigManager:
    """Centralized configuration manager for routetree."""

    DEFAULT_CONFIG_PATHS = [
        "routetree.json",
        "config/routetree.json",
        "~/.routetree/config.json",
        "~/.config/routetree/config.json"
    ]

    def __init__(self, config_path: Optional[Union[str, Path]] = None, create_default: bool = True):
        """Initialize configuration manager.

        Args:
            config_path: Optional path to configuration file.
                        If None, will search default locations.
            create_default: Write a default file when none exists yet.
        """
        self.config_path: Optional[Path] = None
        self.settings: ApplicationSettings = ApplicationSettings()

        if config_path:
            self.config_path = Path(config_path).expanduser().resolve()
        else:
            self.config_path = self._find_config_file()

        if self.config_path and self.config_path.exists():
            self.load()
        elif create_default:
            self._create_default_config()
        elif config_path:
            logger.warning(f"Configuration file not found: {self.config_path}, using defaults")

    def _find_config_file(self) -> Optional[Path]:
        """Find existing configuration file in default locations."""
        for path_str in self.DEFAULT_CONFIG_PATHS:
            path = Path(path_str).expanduser().resolve()
            if path.exists():
                logger.info(f"Found existing config file: {path}")
                return path

        # No existing config found, use first default location
        default_path = Path(self.DEFAULT_CONFIG_PATHS[0]).expanduser().resolve()
        logger.info(f"No existing config found, will create: {default_path}")
        return default_path

    def _create_default_config(self):
        """Create default configuration file."""
        if self.config_path and self.save():
            logger.info(f"Created default configuration file: {self.config_path}")

    def load(self, config_path: Optional[Union[str, Path]] = None) -> bool:
        """Load configuration from file.

        Args:
            config_path: Optional path to load from. Uses instance path if None.

        Returns:
            True if loaded successfully, False otherwise.
        """
        path = Path(config_path).expanduser().resolve() if config_path else self.config_path

        if not path or not path.exists():
            logger.warning(f"Configuration file not found: {path}")
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load configuration from {path}: {e}")
            return False

        self._update_settings_from_dict(config_data)

        errors = self.validate()
        if any(error_list for error_list in errors.values()):
            logger.warning("Configuration validation errors found:")
            for category, error_list in errors.items():
                for error in error_list:
                    logger.warning(f"  {category}: {error}")

        logger.info(f"Configuration loaded from: {path}")
        return True

    def save(self, config_path: Optional[Union[str, Path]] = None) -> bool:
        """Save configuration to file.

        Args:
            config_path: Optional path to save to. Uses instance path if None.

        Returns:
            True if saved successfully, False otherwise.
        """
        path = Path(config_path).expanduser().resolve() if config_path else self.config_path

        if not path:
            logger.error("No configuration path specified")
            return False

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(asdict(self.settings), f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Failed to save configuration to {path}: {e}")
            return False

        logger.info(f"Configuration saved to: {path}")
        return True

    def _update_settings_from_dict(self, config_data: Dict[str, Any]):
        """Update settings from dictionary data."""
        def update_dataclass(obj, data):
            if not isinstance(data, dict):
                return

            for key, value in data.items():
                if hasattr(obj, key):
                    attr = getattr(obj, key)
                    if hasattr(attr, '__dataclass_fields__'):
                        update_dataclass(attr, value)
                    else:
                        setattr(obj, key, value)
                else:
                    logger.warning(f"Ignoring unknown setting: {key}")

        update_dataclass(self.settings, config_data)

    def get_settings(self) -> ApplicationSettings:
        """Get current application settings."""
        return self.settings

    def _update_category(self, category: str, **kwargs):
        section = getattr(self.settings, category)
        for key, value in kwargs.items():
            if hasattr(section, key):
                setattr(section, key, value)
            else:
                logger.warning(f"Unknown {category} setting: {key}")

    def update_topology_settings(self, **kwargs):
        """Update junction tree settings."""
        self._update_category("topology", **kwargs)

    def update_output_settings(self, **kwargs):
        """Update output settings."""
        self._update_category("output", **kwargs)

    def update_logging_settings(self, **kwargs):
        """Update logging settings."""
        self._update_category("logging", **kwargs)

    def validate(self) -> Dict[str, Any]:
        """Validate current settings."""
        return self.settings.validate()

    def require_valid(self):
        """Raise ConfigurationError if any setting is invalid."""
        errors = self.validate()
        problems = [f"{category}: {error}" for category, error_list in errors.items() for error in error_list]
        if problems:
            raise ConfigurationError(
                "Invalid configuration: " + "; ".join(problems),
                error_code="CONFIG", details=errors
            )
