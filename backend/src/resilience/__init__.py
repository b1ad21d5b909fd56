"""
Resilience layer for the LMS backend: error categorization, retries with
backoff and per-operation circuit breakers.
"""
from .circuit_breaker import CircuitBreakerRegistry, CircuitBreakerState
from .classification import CategorizedError, ErrorCategorizer, ErrorPattern
from .config import ResilienceSettings
from .decorator import retryable
from .exceptions import CircuitBreakerOpenError, ResilienceError
from .executor import RetryExecutor, get_retry_executor
from .health import DatabaseHealthMonitor
from .log import configure_logging
from .types import CircuitState, ErrorCategory, ErrorSeverity, RetryOptions


__all__ = [
    # Executor
    'RetryExecutor',
    'RetryOptions',
    'get_retry_executor',
    'retryable',

    # Circuit breaker
    'CircuitBreakerRegistry',
    'CircuitBreakerState',
    'CircuitState',

    # Classification
    'ErrorCategorizer',
    'ErrorPattern',
    'CategorizedError',
    'ErrorCategory',
    'ErrorSeverity',

    # Exceptions
    'ResilienceError',
    'CircuitBreakerOpenError',

    # Config, logging, health
    'ResilienceSettings',
    'configure_logging',
    'DatabaseHealthMonitor',
]
