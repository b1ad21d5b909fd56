"""
Exceptions for the resilience layer.

Errors raised by wrapped operations are always propagated unchanged; only
conditions the layer itself detects get a dedicated type here.
"""
import math

from .types import CircuitState, ErrorCategory


class ResilienceError(Exception):
    """Base exception for the resilience layer."""

    def __init__(self, message: str, category: ErrorCategory = ErrorCategory.UNKNOWN):
        super().__init__(message)
        self.category = category


class CircuitBreakerOpenError(ResilienceError):
    """Raised when a call is rejected because its circuit breaker is open.

    A HALF_OPEN breaker whose trial slots are all taken rejects with
    ``state=CircuitState.HALF_OPEN``; it has no countdown.
    """

    def __init__(
        self,
        key: str,
        timeout_remaining: float,
        state: CircuitState = CircuitState.OPEN
    ):
        if state == CircuitState.HALF_OPEN:
            message = f"Circuit breaker half-open for {key}; all trial calls are in flight"
        else:
            # Round up so a nearly elapsed window never reads as 0.0s
            retry_in = max(math.ceil(timeout_remaining * 10) / 10, 0.1)
            message = f"Circuit breaker open for {key}; retry in {retry_in:.1f}s"
        super().__init__(message)
        self.key = key
        self.timeout_remaining = timeout_remaining
        self.state = state
