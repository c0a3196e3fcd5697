"""
Configuration Validation
========================

Validation for configuration dictionaries with detailed error reporting.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from nltk.stem import SnowballStemmer

logger = logging.getLogger(__name__)

VALID_ENVIRONMENTS = ["development", "testing", "production"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
BUILTIN_STEMMERS = ["porter", "uk", "multi"]


@dataclass
class ValidationError:
    """Validation error details."""
    field_path: str
    message: str
    severity: str = "error"  # error, warning
    suggested_value: Optional[Any] = None


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self):
        self.errors: List[ValidationError] = []
        self.warnings: List[ValidationError] = []
        self.is_valid = True

    def add_error(self, field_path: str, message: str, suggested_value: Optional[Any] = None):
        """Add validation error."""
        self.errors.append(ValidationError(field_path, message, "error", suggested_value))
        self.is_valid = False

    def add_warning(self, field_path: str, message: str):
        """Add validation warning."""
        self.warnings.append(ValidationError(field_path, message, "warning"))

    def get_summary(self) -> str:
        """Get validation summary."""
        if self.is_valid:
            return f"Configuration valid. {len(self.warnings)} warnings."
        return f"Configuration invalid. {len(self.errors)} errors, {len(self.warnings)} warnings."


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validator for talkcore settings."""

    @staticmethod
    def validate_ratio(value: Any, field_path: str, result: ValidationResult):
        """Validate a value in [0, 1]."""
        if not _is_number(value) or not (0.0 <= value <= 1.0):
            result.add_error(field_path, f"Must be a number between 0.0 and 1.0, got {value!r}")

    @staticmethod
    def validate_bot_config(config: Dict[str, Any], result: ValidationResult):
        """Validate dialogue engine configuration."""
        prefix = "bot"

        ConfigValidator.validate_ratio(config.get("min_threshold", 0.75), f"{prefix}.min_threshold", result)
        ConfigValidator.validate_ratio(config.get("min_deviation", 0.05), f"{prefix}.min_deviation", result)

        max_reentries = config.get("max_reentries", 1)
        if not isinstance(max_reentries, int) or isinstance(max_reentries, bool) or max_reentries < 0:
            result.add_error(f"{prefix}.max_reentries", "Max reentries must be non-negative integer")
        elif max_reentries == 0:
            result.add_warning(
                f"{prefix}.max_reentries", "Requests finishing a conversation will fail with 0 reentries"
            )

    @staticmethod
    def validate_entity_config(config: Dict[str, Any], result: ValidationResult):
        """Validate entity extraction configuration."""
        threshold = config.get("min_threshold", 0.75)
        ConfigValidator.validate_ratio(threshold, "entities.min_threshold", result)
        if _is_number(threshold) and threshold < 0.5:
            result.add_warning("entities.min_threshold", "Low threshold may match unrelated words")

    @staticmethod
    def validate_classifier_config(config: Dict[str, Any], result: ValidationResult):
        """Validate classifier configuration."""
        prefix = "classifier"

        languages = config.get("languages", ["en"])
        if not isinstance(languages, list) or not languages:
            result.add_error(f"{prefix}.languages", "At least one language is required")
        else:
            for language in languages:
                if not isinstance(language, str) or not language or "/" in language:
                    result.add_error(f"{prefix}.languages", f"Invalid language code: {language!r}")

        stemmer = config.get("stemmer", "porter")
        valid_stemmers = BUILTIN_STEMMERS + list(SnowballStemmer.languages)
        if stemmer not in valid_stemmers:
            result.add_error(f"{prefix}.stemmer", f"Invalid stemmer. Must be one of: {valid_stemmers}")

        regularization = config.get("regularization", 50.0)
        if not _is_number(regularization) or regularization <= 0:
            result.add_error(f"{prefix}.regularization", "Regularization must be a positive number")

        max_iter = config.get("max_iter", 1000)
        if not isinstance(max_iter, int) or isinstance(max_iter, bool) or max_iter <= 0:
            result.add_error(f"{prefix}.max_iter", "Max iterations must be positive integer")

    @staticmethod
    def validate_observability_config(config: Dict[str, Any], result: ValidationResult):
        """Validate observability configuration."""
        log_level = config.get("log_level", "INFO")
        if log_level not in VALID_LOG_LEVELS:
            result.add_error(
                "observability.log_level", f"Invalid log level. Must be one of: {VALID_LOG_LEVELS}"
            )

    @classmethod
    def validate_settings(cls, settings_dict: Dict[str, Any]) -> ValidationResult:
        """Validate complete settings configuration."""
        result = ValidationResult()

        environment = settings_dict.get("environment", "development")
        if environment not in VALID_ENVIRONMENTS:
            result.add_error("environment", f"Invalid environment. Must be one of: {VALID_ENVIRONMENTS}")

        validators = {
            "bot": cls.validate_bot_config,
            "entities": cls.validate_entity_config,
            "classifier": cls.validate_classifier_config,
            "observability": cls.validate_observability_config,
        }
        for section, validate in validators.items():
            if section not in settings_dict:
                continue
            if not isinstance(settings_dict[section], dict):
                result.add_error(section, "Section must be a mapping")
                continue
            validate(settings_dict[section], result)

        if "shell" in settings_dict and not isinstance(settings_dict["shell"], dict):
            result.add_error("shell", "Section must be a mapping")

        logger.debug(f"Configuration validation completed: {result.get_summary()}")
        return result
