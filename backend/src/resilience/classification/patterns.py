"""Predefined error patterns for classification.

Patterns are evaluated in list order and the first match wins, so
authorization failures are classified before anything that might share
network phrasing.
"""
import asyncio

import aiohttp

from ..types import ErrorCategory, ErrorSeverity
from .categories import ErrorPattern

AUTH_PATTERN = ErrorPattern(
    category=ErrorCategory.AUTH,
    severity=ErrorSeverity.HIGH,
    is_retryable=False,
    label="Access denied",
    indicators=[
        "unauthorized",
        "invalid token",
        "token expired",
        "forbidden",
        "access denied",
        "permission",
    ],
    exception_types=(PermissionError,),
    status_codes=[401, 403],
    suggestions=[
        "Verify user credentials and permissions",
        "Check token validity and expiration",
        "Check role-based access controls",
    ],
)

DATA_INTEGRITY_PATTERN = ErrorPattern(
    category=ErrorCategory.DATA_INTEGRITY,
    severity=ErrorSeverity.HIGH,
    is_retryable=False,
    label="Data integrity issue",
    indicators=[
        "not found",
        "does not exist",
        "no matching record",
        "foreign key constraint",
    ],
    status_codes=[404],
    suggestions=[
        "Verify that referenced records exist in the database",
        "Check for race conditions during record deletion",
        "Ensure proper data validation before operations",
    ],
)

TIMEOUT_PATTERN = ErrorPattern(
    category=ErrorCategory.TIMEOUT,
    severity=ErrorSeverity.MEDIUM,
    is_retryable=True,
    label="Operation timed out",
    indicators=["etimedout", "esockettimedout", "timed out", "timeout"],
    exception_types=(TimeoutError, asyncio.TimeoutError, aiohttp.ServerTimeoutError),
    status_codes=[408],
    suggestions=[
        "Increase timeout values",
        "Optimize query performance",
        "Check system resources",
    ],
)

NETWORK_PATTERN = ErrorPattern(
    category=ErrorCategory.NETWORK,
    severity=ErrorSeverity.MEDIUM,
    is_retryable=True,
    label="Network connectivity issue",
    indicators=[
        "econnreset",
        "econnrefused",
        "enotfound",
        "connection lost",
        "connection terminated",
        "connection was killed",
        "connection refused",
        "connection reset",
        "server has gone away",
        "server disconnected",
        "socket hang up",
        "network error",
    ],
    exception_types=(ConnectionError, aiohttp.ClientConnectionError),
    suggestions=[
        "Check network connectivity",
        "Verify database server is running",
        "Review connection pool settings",
    ],
)

RATE_LIMIT_PATTERN = ErrorPattern(
    category=ErrorCategory.RATE_LIMIT,
    severity=ErrorSeverity.MEDIUM,
    is_retryable=True,
    label="Rate limit exceeded",
    indicators=["rate limit", "too many requests", "throttle"],
    status_codes=[429],
    suggestions=[
        "Implement exponential backoff",
        "Review rate limiting policies",
        "Consider request batching",
    ],
)

ALL_PATTERNS: list[ErrorPattern] = [
    AUTH_PATTERN,
    DATA_INTEGRITY_PATTERN,
    TIMEOUT_PATTERN,
    NETWORK_PATTERN,
    RATE_LIMIT_PATTERN,
]

UNKNOWN_SUGGESTIONS = [
    "Review error details for more context",
    "Check system logs for additional information",
    "Consider implementing specific error handling",
]
