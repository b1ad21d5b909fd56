"""Decorator form of RetryExecutor.execute.
"""
import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar, cast

from .executor import RetryExecutor, get_retry_executor
from .types import OnRetry, RetryOptions, ShouldRetry

F = TypeVar('F', bound=Callable[..., Any])

DEFAULT_CONTEXT_ARGS = ("test_id", "user_id")


def retryable(
    max_retries: int | None = None,
    initial_delay_ms: float | None = None,
    exponential_backoff: bool = True,
    should_retry: ShouldRetry | None = None,
    on_retry: OnRetry | None = None,
    operation: str | None = None,
    context_args: tuple[str, ...] = DEFAULT_CONTEXT_ARGS,
    executor: RetryExecutor | None = None
) -> Callable[[F], F]:
    """Decorator to run a coroutine function through the retry executor.

    Args:
        max_retries: Maximum number of attempts (default: executor settings)
        initial_delay_ms: First retry delay in milliseconds (default: executor settings)
        exponential_backoff: Double the delay between attempts (default: True)
        should_retry: Predicate overriding the categorizer's retry verdict
        on_retry: Callback invoked as ``on_retry(attempt, error)`` before each wait
        operation: Logical operation name (default: the function's qualified name)
        context_args: Call arguments copied into the context, e.g. ``test_id``
        executor: Executor to use (default: the process-wide executor)

    Returns:
        Decorated coroutine function

    """
    def decorator(func: F) -> F:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"@retryable requires a coroutine function, got {func!r}")

        operation_name = operation or func.__qualname__
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            runner = executor or get_retry_executor()
            defaults = runner.default_options()

            context: dict[str, Any] = {"operation": operation_name}
            if context_args:
                bound = signature.bind_partial(*args, **kwargs)
                for name in context_args:
                    if name in bound.arguments:
                        context[name] = bound.arguments[name]

            options = RetryOptions(
                max_retries=max_retries if max_retries is not None else defaults.max_retries,
                initial_delay_ms=(
                    initial_delay_ms if initial_delay_ms is not None else defaults.initial_delay_ms
                ),
                exponential_backoff=exponential_backoff,
                should_retry=should_retry,
                on_retry=on_retry,
                context=context,
            )
            return await runner.execute(lambda: func(*args, **kwargs), options)

        return cast(F, wrapper)

    return decorator
