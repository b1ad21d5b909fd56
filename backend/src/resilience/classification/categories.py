"""Error pattern definitions and classification result types."""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..types import ErrorCategory, ErrorSeverity


def extract_status_code(error: BaseException) -> int | None:
    """Return the HTTP status carried by an exception, if any.

    Understands ``status`` (aiohttp) and ``status_code`` attributes.
    """
    for attr in ("status", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


@dataclass
class ErrorPattern:
    """Pattern definition for matching errors."""

    category: ErrorCategory
    severity: ErrorSeverity
    is_retryable: bool
    label: str  # Prefix for the human-readable message
    indicators: list[str] = field(default_factory=list)  # Lowercase substrings
    exception_types: tuple[type, ...] = ()
    status_codes: list[int] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    def matches(self, error: BaseException) -> bool:
        """Check whether the error falls under this pattern."""
        if self.exception_types and isinstance(error, self.exception_types):
            return True

        status = extract_status_code(error)
        if status is not None and status in self.status_codes:
            return True

        error_str = str(error).lower()
        return any(indicator in error_str for indicator in self.indicators)


@dataclass
class CategorizedError:
    """Result of error classification."""

    category: ErrorCategory
    severity: ErrorSeverity
    is_retryable: bool
    original_error: BaseException
    message: str
    suggestions: list[str]
    context: dict[str, Any]

    @property
    def timestamp(self) -> datetime:
        return self.context["timestamp"]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "error_type": type(self.original_error).__name__,
            "error_message": str(self.original_error),
            "category": self.category.value,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
            "message": self.message,
            "suggestions": list(self.suggestions),
            "context": {
                key: value.isoformat() if isinstance(value, datetime) else value
                for key, value in self.context.items()
            },
        }
