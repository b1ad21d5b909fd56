"""
Shared type definitions for the resilience layer.
"""
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union


# Type variables
T = TypeVar('T')

Operation = Callable[[], Union[Awaitable[T], T]]
ShouldRetry = Callable[[BaseException], bool]
OnRetry = Callable[[int, BaseException], None]


class ErrorCategory(str, Enum):
    """Categories for classifying errors."""
    NETWORK = "network"
    TIMEOUT = "timeout"
    AUTH = "auth"
    VALIDATION = "validation"  # Reserved, only emitted by custom patterns
    DATA_INTEGRITY = "data_integrity"
    RATE_LIMIT = "rate_limit"
    UNKNOWN = "unknown"


class ErrorSeverity(str, Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class CircuitState(str, Enum):
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class RetryOptions:
    """Per-call retry configuration."""

    def __init__(
        self,
        max_retries: int = 5,
        initial_delay_ms: float = 2000,
        exponential_backoff: bool = True,
        should_retry: Optional[ShouldRetry] = None,
        on_retry: Optional[OnRetry] = None,
        context: Optional[dict[str, Any]] = None
    ):
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1, got {max_retries}")
        if initial_delay_ms < 0:
            raise ValueError(f"initial_delay_ms must be >= 0, got {initial_delay_ms}")

        self.max_retries = max_retries
        self.initial_delay_ms = initial_delay_ms
        self.exponential_backoff = exponential_backoff
        self.should_retry = should_retry
        self.on_retry = on_retry
        self.context = dict(context or {})

    def replace(self, **changes: Any) -> 'RetryOptions':
        """Return a copy with the given fields overridden."""
        values = {
            "max_retries": self.max_retries,
            "initial_delay_ms": self.initial_delay_ms,
            "exponential_backoff": self.exponential_backoff,
            "should_retry": self.should_retry,
            "on_retry": self.on_retry,
            "context": self.context,
        }
        values.update(changes)
        return RetryOptions(**values)

    def __repr__(self) -> str:
        return (
            f"RetryOptions(max_retries={self.max_retries}, "
            f"initial_delay_ms={self.initial_delay_ms}, "
            f"exponential_backoff={self.exponential_backoff}, "
            f"context={self.context!r})"
        )
