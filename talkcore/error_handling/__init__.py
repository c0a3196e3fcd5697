"""
Error Handling
==============

Error taxonomy shared by every talkcore component.

Errors are grouped by category:
- configuration errors are fatal at setup time and never retried
- training errors must be fixed by the caller before training succeeds
- runtime-state errors mean an operation was called too early (e.g. before training)
- handler errors are failures raised inside a conversation handler
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error categories for classification."""
    CONFIGURATION = "configuration"
    TRAINING = "training"
    RUNTIME_STATE = "runtime_state"
    HANDLER = "handler"


class TalkcoreError(Exception):
    """Base exception for talkcore operations."""

    default_category = ErrorCategory.CONFIGURATION

    def __init__(self, message: str, category: Optional[ErrorCategory] = None,
                 original_error: Optional[Exception] = None, **kwargs):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.original_error = original_error
        self.metadata: Dict[str, Any] = kwargs

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
            "original_error": repr(self.original_error) if self.original_error else None,
            "metadata": self.metadata,
        }


class ConfigurationError(TalkcoreError):
    """Exception raised for invalid or missing settings."""
    default_category = ErrorCategory.CONFIGURATION


class EntityError(TalkcoreError):
    """Exception raised for entity extractor and registry issues."""
    default_category = ErrorCategory.CONFIGURATION


class ClassifierError(TalkcoreError):
    """Exception raised for classifier training and usage issues."""
    default_category = ErrorCategory.TRAINING


class BotError(TalkcoreError):
    """Exception raised for bot setup and dispatch issues."""
    default_category = ErrorCategory.CONFIGURATION


class RoutineError(TalkcoreError):
    """Exception raised for conversation routine misuse."""
    default_category = ErrorCategory.RUNTIME_STATE


__all__ = [
    "ErrorCategory",
    "TalkcoreError",
    "ConfigurationError",
    "EntityError",
    "ClassifierError",
    "BotError",
    "RoutineError",
]
