"""Retry executor with circuit breaker protection.

Every database and external-service call in the backend goes through
``RetryExecutor.execute`` or one of its presets.
"""
import asyncio
import errno
import inspect
import logging
import time
from typing import Any

from .circuit_breaker import CircuitBreakerRegistry
from .classification import CategorizedError, ErrorCategorizer, extract_status_code
from .config import ResilienceSettings
from .strategies import BaseStrategy, ExponentialBackoffStrategy, FixedDelayStrategy
from .types import Operation, RetryOptions, T

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = (500, 502, 503, 504)
RETRYABLE_FILE_ERRNOS = {
    errno.EBUSY: "EBUSY",
    errno.EMFILE: "EMFILE",
    errno.ENFILE: "ENFILE",
    errno.EAGAIN: "EAGAIN",
}


class RetryExecutor:
    """Runs async operations with bounded retries and per-key circuit breakers."""

    def __init__(
        self,
        settings: ResilienceSettings | None = None,
        categorizer: ErrorCategorizer | None = None,
        registry: CircuitBreakerRegistry | None = None
    ):
        self.settings = settings if settings is not None else ResilienceSettings()
        self.categorizer = categorizer if categorizer is not None else ErrorCategorizer()
        self.registry = (
            registry if registry is not None else CircuitBreakerRegistry(self.settings)
        )

    def default_options(self) -> RetryOptions:
        return RetryOptions(
            max_retries=self.settings.max_retries,
            initial_delay_ms=self.settings.initial_delay_ms,
        )

    async def execute(
        self,
        operation: Operation[T],
        options: RetryOptions | None = None,
        **overrides: Any
    ) -> T:
        """Execute an operation with retry logic.

        Args:
            operation: Zero-argument callable; its result is awaited if awaitable
            options: Retry configuration (defaults from settings)
            **overrides: Individual RetryOptions fields to override

        Returns:
            The operation's result

        Raises:
            CircuitBreakerOpenError: The breaker for this call's key is open
            Exception: The last error raised by the operation, unchanged

        """
        options = options or self.default_options()
        if overrides:
            options = options.replace(**overrides)

        key = self.registry.build_key(options.context)
        trial = self.registry.before_call(key)

        strategy = self._strategy_for(options)
        name = options.context.get("operation") or getattr(operation, "__qualname__", repr(operation))
        started = time.monotonic()
        last_error: Exception | None = None

        for attempt in range(1, options.max_retries + 1):
            try:
                result = operation()
                if inspect.isawaitable(result):
                    result = await result
            except Exception as error:
                last_error = error
                categorized = self.categorizer.categorize(error, options.context)
                self.registry.record_failure(key)

                logger.warning(
                    f"Operation {name} failed on attempt {attempt}/{options.max_retries}: "
                    f"{ErrorCategorizer.format_for_logging(categorized)}"
                )

                if not self._should_retry(options, error, categorized):
                    logger.error(
                        f"Non-retryable error in {name}: {categorized.message} "
                        f"(category={categorized.category.value}, "
                        f"suggestions={categorized.suggestions})"
                    )
                    raise

                if trial:
                    logger.error(
                        f"Trial call for {name} failed; circuit breaker {key} reopened. "
                        f"Last error: {error}"
                    )
                    raise

                if attempt == options.max_retries:
                    logger.error(
                        f"Max retries ({options.max_retries}) exceeded for {name} "
                        f"after {time.monotonic() - started:.2f}s. Last error: {error}"
                    )
                    raise

                if options.on_retry:
                    options.on_retry(attempt, error)

                delay_ms = strategy.calculate_delay(attempt)
                logger.debug(
                    f"Waiting {delay_ms:.0f}ms before retry attempt {attempt + 1} "
                    f"of {name} ({strategy.name}). Error: {type(error).__name__}"
                )
                await asyncio.sleep(delay_ms / 1000.0)
            except BaseException:
                # Cancelled or interrupted: no outcome to record
                if trial:
                    self.registry.release_trial(key)
                raise
            else:
                self.registry.record_success(key)
                if attempt > 1:
                    logger.info(f"Operation {name} succeeded on attempt {attempt}")
                return result

        raise last_error or RuntimeError("Retry loop exited without a result")

    async def execute_database(
        self,
        operation: Operation[T],
        context: dict[str, Any] | None = None,
        **overrides: Any
    ) -> T:
        """Preset for database calls: long, aggressive retries on connection errors."""
        options = RetryOptions(
            max_retries=5,
            initial_delay_ms=3000,
            exponential_backoff=True,
            context=context,
        )
        return await self.execute(operation, options, **overrides)

    async def execute_api(
        self,
        operation: Operation[T],
        context: dict[str, Any] | None = None,
        **overrides: Any
    ) -> T:
        """Preset for outbound API calls: short retries, also on 5xx responses."""
        options = RetryOptions(
            max_retries=2,
            initial_delay_ms=500,
            exponential_backoff=True,
            should_retry=self._api_should_retry,
            context=context,
        )
        return await self.execute(operation, options, **overrides)

    async def execute_file(
        self,
        operation: Operation[T],
        context: dict[str, Any] | None = None,
        **overrides: Any
    ) -> T:
        """Preset for filesystem calls: brief fixed-delay retries on lock contention."""
        options = RetryOptions(
            max_retries=2,
            initial_delay_ms=250,
            exponential_backoff=False,
            should_retry=is_transient_file_error,
            context=context,
        )
        return await self.execute(operation, options, **overrides)

    def get_circuit_breaker_status(self) -> dict[str, dict[str, Any]]:
        return self.registry.snapshot()

    def reset_circuit_breaker(self, key: str) -> bool:
        return self.registry.reset(key)

    def reset_all_circuit_breakers(self) -> None:
        self.registry.reset_all()

    def _strategy_for(self, options: RetryOptions) -> BaseStrategy:
        if options.exponential_backoff:
            return ExponentialBackoffStrategy(
                initial_delay_ms=options.initial_delay_ms,
                max_delay_ms=self.settings.max_delay_ms,
                jitter_ratio=self.settings.jitter_ratio,
            )
        return FixedDelayStrategy(options.initial_delay_ms)

    @staticmethod
    def _should_retry(
        options: RetryOptions,
        error: Exception,
        categorized: CategorizedError
    ) -> bool:
        if options.should_retry is not None:
            return bool(options.should_retry(error))
        return categorized.is_retryable

    def _api_should_retry(self, error: BaseException) -> bool:
        if self.categorizer.is_retryable(error):
            return True
        return is_server_error(error)


def is_server_error(error: BaseException) -> bool:
    """True for 500/502/503/504, read from a typed status when present."""
    status = extract_status_code(error)
    if status is not None:
        return status in RETRYABLE_STATUS_CODES
    # Fallback for callers that only stringify the status into the message
    message = str(error)
    return any(str(code) in message for code in RETRYABLE_STATUS_CODES)


def is_transient_file_error(error: BaseException) -> bool:
    """True for filesystem lock contention and descriptor exhaustion."""
    if isinstance(error, OSError) and error.errno in RETRYABLE_FILE_ERRNOS:
        return True
    message = str(error)
    return any(name in message for name in RETRYABLE_FILE_ERRNOS.values())


_default_executor: RetryExecutor | None = None


def get_retry_executor() -> RetryExecutor:
    """Process-wide executor, configured from the environment on first use."""
    global _default_executor
    if _default_executor is None:
        _default_executor = RetryExecutor(ResilienceSettings.from_env())
    return _default_executor
