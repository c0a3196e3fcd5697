"""
Configuration Manager
=====================

YAML based settings with environment-specific files, environment variable
overrides and validation.
"""

import logging
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import yaml

from ..error_handling import ConfigurationError
from ..nlp.language import DEFAULT_LANGUAGES
from .validation import ConfigValidator

logger = logging.getLogger(__name__)

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class Environment(Enum):
    """Environment types for configuration."""
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


@dataclass
class BotConfig:
    """Dialogue engine settings."""
    min_threshold: float = 0.75
    min_deviation: float = 0.05
    max_reentries: int = 1


@dataclass
class EntityConfig:
    """Entity extraction settings."""
    min_threshold: float = 0.75


@dataclass
class ClassifierConfig:
    """Intent classifier settings."""
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))
    stemmer: str = "porter"
    keep_stops: bool = True
    regularization: float = 50.0
    max_iter: int = 1000


@dataclass
class ObservabilityConfig:
    """Logging configuration."""
    log_level: str = "INFO"
    log_format: str = DEFAULT_LOG_FORMAT


@dataclass
class ShellConfig:
    """Interactive shell settings."""
    user_id: str = "user"
    prompt: str = "User> "
    debug: bool = False


@dataclass
class Settings:
    """Application settings."""
    environment: Environment = Environment.DEVELOPMENT
    bot: BotConfig = field(default_factory=BotConfig)
    entities: EntityConfig = field(default_factory=EntityConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        data = asdict(self)
        data["environment"] = self.environment.value
        return data


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Settings path, environment variable and value converter.
ENV_OVERRIDES: List[Tuple[str, str, Callable[[str], Any]]] = [
    ("observability.log_level", "TALKCORE_LOG_LEVEL", str.upper),
    ("bot.min_threshold", "TALKCORE_MIN_THRESHOLD", float),
    ("bot.min_deviation", "TALKCORE_MIN_DEVIATION", float),
    ("classifier.languages", "TALKCORE_LANGUAGES", _split_list),
    ("classifier.stemmer", "TALKCORE_STEMMER", str.strip),
]

SECTIONS = {
    "bot": BotConfig,
    "entities": EntityConfig,
    "classifier": ClassifierConfig,
    "observability": ObservabilityConfig,
    "shell": ShellConfig,
}


class ConfigManager:
    """
    Loads, overrides and validates talkcore settings.

    Without an explicit path, settings.<TALKCORE_ENV>.yaml is looked up next
    to this module first, then settings.yaml.
    """

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self._find_config_path()
        self._settings: Optional[Settings] = None
        self.load_config()

    def _find_config_path(self) -> str:
        """Find configuration file path based on environment."""
        env = os.environ.get("TALKCORE_ENV", Environment.DEVELOPMENT.value)
        config_dir = Path(__file__).parent

        env_config = config_dir / f"settings.{env}.yaml"
        if env_config.exists():
            return str(env_config)

        default_config = config_dir / "settings.yaml"
        if default_config.exists():
            return str(default_config)

        raise ConfigurationError("No configuration file found", directory=str(config_dir))

    def load_config(self) -> Settings:
        """Load configuration from file."""
        try:
            with open(self.config_path, "r", encoding="utf-8") as f:
                config_data = yaml.safe_load(f) or {}
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Configuration file not found: {self.config_path}", original_error=e
            )
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Malformed configuration file: {self.config_path}", original_error=e
            )

        if not isinstance(config_data, dict):
            raise ConfigurationError(f"Configuration root must be a mapping: {self.config_path}")

        config_data = self._merge_environment_variables(config_data)
        self._settings = create_settings(config_data)
        logger.info(f"Configuration loaded from {self.config_path}")
        return self._settings

    def _merge_environment_variables(self, config_data: Dict[str, Any]) -> Dict[str, Any]:
        """Merge environment variables with configuration data."""
        for config_path, env_var, convert in ENV_OVERRIDES:
            env_value = os.environ.get(env_var)
            if not env_value:
                continue
            try:
                value = convert(env_value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {env_var}: {env_value!r}", original_error=e, variable=env_var
                )
            self._set_nested_value(config_data, config_path, value)
        return config_data

    def _set_nested_value(self, data: Dict[str, Any], path: str, value: Any):
        """Set nested dictionary value using dot notation."""
        keys = path.split(".")
        current = data

        for key in keys[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    @property
    def settings(self) -> Settings:
        """Get current settings."""
        if self._settings is None:
            self.load_config()
        return self._settings


def create_settings(config_data: Dict[str, Any]) -> Settings:
    """
    Validate a configuration dictionary and build settings from it.

    Args:
        config_data: Parsed configuration, sections as nested mappings

    Returns:
        Settings with defaults for every missing value
    """
    result = ConfigValidator.validate_settings(config_data)
    for warning in result.warnings:
        logger.warning(f"{warning.field_path}: {warning.message}")
    if not result.is_valid:
        problems = "; ".join(f"{error.field_path}: {error.message}" for error in result.errors)
        raise ConfigurationError(
            f"Invalid configuration: {problems}",
            errors=[error.field_path for error in result.errors],
        )

    settings_dict: Dict[str, Any] = {
        "environment": Environment(config_data.get("environment", Environment.DEVELOPMENT.value)),
    }
    for name, section in SECTIONS.items():
        if name not in config_data:
            continue
        try:
            settings_dict[name] = section(**config_data[name])
        except TypeError as e:
            raise ConfigurationError(
                f"Unknown option in configuration section \"{name}\"", original_error=e, section=name
            )
    return Settings(**settings_dict)


def load_settings(config_path: Optional[str] = None) -> Settings:
    """Load settings from a file, or from the bundled defaults."""
    return ConfigManager(config_path).settings
