"""Circuit breaker state keyed by logical operation."""
import logging
import time
from collections.abc import Callable
from dataclasses import asdict, dataclass
from typing import Any

from .config import ResilienceSettings
from .exceptions import CircuitBreakerOpenError
from .types import CircuitState

logger = logging.getLogger(__name__)


@dataclass
class CircuitBreakerState:
    """Breaker bookkeeping for one key."""
    failures: int = 0
    last_failure_time: float | None = None
    state: CircuitState = CircuitState.CLOSED
    half_open_calls: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["state"] = self.state.value
        return data


class CircuitBreakerRegistry:
    """In-memory map of circuit breakers.

    Not synchronised: callers share one event loop, and concurrent failures
    on the same key may race on the counters.
    """

    def __init__(
        self,
        settings: ResilienceSettings | None = None,
        clock: Callable[[], float] = time.monotonic
    ):
        if settings is None:
            settings = ResilienceSettings()
        self.failure_threshold = settings.failure_threshold
        self.recovery_timeout = settings.recovery_timeout
        self.half_open_max_calls = settings.half_open_max_calls
        self._clock = clock
        self._breakers: dict[str, CircuitBreakerState] = {}

    @staticmethod
    def build_key(context: dict[str, Any] | None) -> str:
        """Derive the breaker key from operation, test and user ids."""
        context = context or {}
        operation = context.get("operation") or "unknown"
        test_id = context.get("test_id")
        user_id = context.get("user_id")
        return (
            f"{operation}:"
            f"{test_id if test_id is not None else 'any'}:"
            f"{user_id if user_id is not None else 'any'}"
        )

    def get(self, key: str) -> CircuitBreakerState:
        """Get or lazily create the breaker for a key."""
        breaker = self._breakers.get(key)
        if breaker is None:
            breaker = CircuitBreakerState()
            self._breakers[key] = breaker
        return breaker

    def before_call(self, key: str) -> bool:
        """Admit a call or raise CircuitBreakerOpenError.

        Returns:
            True when the call was admitted as a HALF_OPEN trial. The caller
            must then report it through record_success, record_failure or
            release_trial.

        """
        breaker = self.get(key)

        if breaker.state == CircuitState.CLOSED:
            return False

        if breaker.state == CircuitState.OPEN:
            elapsed = self._clock() - (breaker.last_failure_time or 0.0)
            if elapsed <= self.recovery_timeout:
                raise CircuitBreakerOpenError(key, self.recovery_timeout - elapsed)
            breaker.state = CircuitState.HALF_OPEN
            breaker.failures = 0
            breaker.half_open_calls = 0
            logger.info(f"Circuit breaker {key}: OPEN -> HALF_OPEN after {elapsed:.1f}s")

        if breaker.half_open_calls >= self.half_open_max_calls:
            raise CircuitBreakerOpenError(key, 0.0, state=CircuitState.HALF_OPEN)
        breaker.half_open_calls += 1
        return True

    def release_trial(self, key: str) -> None:
        """Give back a HALF_OPEN trial slot whose call ended without an outcome."""
        breaker = self.get(key)
        if breaker.state == CircuitState.HALF_OPEN and breaker.half_open_calls > 0:
            breaker.half_open_calls -= 1
            logger.debug(f"Circuit breaker {key}: trial slot released")

    def record_success(self, key: str) -> None:
        breaker = self.get(key)
        if breaker.state != CircuitState.CLOSED:
            logger.info(f"Circuit breaker {key}: {breaker.state.name} -> CLOSED")
        breaker.state = CircuitState.CLOSED
        breaker.failures = 0
        breaker.half_open_calls = 0

    def record_failure(self, key: str) -> None:
        breaker = self.get(key)
        breaker.failures += 1
        breaker.last_failure_time = self._clock()

        if breaker.state == CircuitState.HALF_OPEN:
            breaker.state = CircuitState.OPEN
            breaker.half_open_calls = 0
            logger.warning(f"Circuit breaker {key}: HALF_OPEN -> OPEN (trial call failed)")
        elif breaker.state == CircuitState.CLOSED and breaker.failures >= self.failure_threshold:
            breaker.state = CircuitState.OPEN
            logger.warning(
                f"Circuit breaker {key}: CLOSED -> OPEN "
                f"after {breaker.failures} consecutive failures"
            )

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """Copy of every breaker's state, for monitoring."""
        return {key: breaker.to_dict() for key, breaker in self._breakers.items()}

    def reset(self, key: str) -> bool:
        """Delete one breaker. Returns whether it existed."""
        existed = self._breakers.pop(key, None) is not None
        if existed:
            logger.info(f"Circuit breaker {key} reset")
        return existed

    def reset_all(self) -> None:
        count = len(self._breakers)
        self._breakers.clear()
        logger.info(f"Reset {count} circuit breakers")

    def __contains__(self, key: str) -> bool:
        return key in self._breakers

    def __len__(self) -> int:
        return len(self._breakers)
