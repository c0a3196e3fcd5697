"""
Configuration Module
====================

Settings loading, validation and logging setup.
"""

import logging

from .config_manager import (
    Settings, ConfigManager, Environment,
    BotConfig, EntityConfig, ClassifierConfig, ObservabilityConfig, ShellConfig,
    create_settings, load_settings,
)
from .validation import ConfigValidator, ValidationError, ValidationResult


def setup_logging(observability: ObservabilityConfig):
    """Configure the root logger from observability settings."""
    level = getattr(logging, observability.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=observability.log_format)
    logging.getLogger().setLevel(level)


__all__ = [
    "Settings", "ConfigManager", "Environment",
    "BotConfig", "EntityConfig", "ClassifierConfig", "ObservabilityConfig", "ShellConfig",
    "create_settings", "load_settings", "setup_logging",
    "ConfigValidator", "ValidationError", "ValidationResult",
]
