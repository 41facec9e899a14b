"""Configuration management."""
from .config_manager import ConfigManager
from .settings import (
    TopologySettings, OutputSettings, LoggingSettings, ApplicationSettings
)

__all__ = [
    'ConfigManager',
    'TopologySettings', 'OutputSettings', 'LoggingSettings', 'ApplicationSettings'
]
