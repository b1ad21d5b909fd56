"""Error categorizer implementation."""
import logging
from datetime import datetime, timezone
from typing import Any

from ..types import ErrorCategory, ErrorSeverity
from .categories import CategorizedError, ErrorPattern
from .patterns import ALL_PATTERNS, UNKNOWN_SUGGESTIONS

logger = logging.getLogger(__name__)


class ErrorCategorizer:
    """Classifies raw exceptions into categories with a retry verdict."""

    def __init__(
        self,
        custom_patterns: list[ErrorPattern] | None = None,
        unknown_retryable: bool = False
    ):
        """Initialize categorizer.

        Args:
            custom_patterns: Extra patterns, evaluated after the built-in ones
            unknown_retryable: Retry verdict for errors no pattern matches

        """
        self.patterns = ALL_PATTERNS.copy()
        if custom_patterns:
            self.patterns.extend(custom_patterns)
        self.unknown_retryable = unknown_retryable

    def add_pattern(self, pattern: ErrorPattern) -> None:
        """Register an additional pattern after the existing ones."""
        self.patterns.append(pattern)

    def categorize(
        self,
        error: BaseException,
        context: dict[str, Any] | None = None
    ) -> CategorizedError:
        """Classify an error. Never raises."""
        full_context = dict(context or {})
        full_context["timestamp"] = datetime.now(timezone.utc)

        for pattern in self.patterns:
            try:
                matched = pattern.matches(error)
            except Exception as e:
                # A broken __str__ on the error must not break classification
                logger.debug(f"Pattern {pattern.category.value} failed on {type(error).__name__}: {e}")
                continue
            if matched:
                return CategorizedError(
                    category=pattern.category,
                    severity=pattern.severity,
                    is_retryable=pattern.is_retryable,
                    original_error=error,
                    message=f"{pattern.label}: {_describe(error)}",
                    suggestions=list(pattern.suggestions),
                    context=full_context,
                )

        return CategorizedError(
            category=ErrorCategory.UNKNOWN,
            severity=ErrorSeverity.MEDIUM,
            is_retryable=self.unknown_retryable,
            original_error=error,
            message=f"Unknown error: {_describe(error)}",
            suggestions=list(UNKNOWN_SUGGESTIONS),
            context=full_context,
        )

    def is_retryable(self, error: BaseException, context: dict[str, Any] | None = None) -> bool:
        return self.categorize(error, context).is_retryable

    @staticmethod
    def format_for_logging(categorized: CategorizedError) -> str:
        """Render a categorized error as a single log line."""
        context_str = ""
        if categorized.context:
            parts = []
            for key, value in categorized.context.items():
                if isinstance(value, datetime):
                    value = value.isoformat()
                parts.append(f"{key}:{value}")
            context_str = f"[{', '.join(parts)}] "

        return (
            f"[{categorized.category.value.upper()}/{categorized.severity.value.upper()}] "
            f"{context_str}{categorized.message}"
        )


def _describe(error: BaseException) -> str:
    try:
        text = str(error)
    except Exception:
        text = ""
    return text or type(error).__name__
