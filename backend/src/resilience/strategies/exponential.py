"""
Exponential backoff retry strategy.
"""
import random

from .base import BaseStrategy


class ExponentialBackoffStrategy(BaseStrategy):
    """
    Exponential backoff strategy with multiplicative jitter.

    The first wait is exactly ``initial_delay_ms``. Each later wait doubles
    the base delay, capped at ``max_delay_ms``, then scales it by a uniform
    factor in ``[1 - jitter_ratio, 1 + jitter_ratio]``. The result never
    exceeds ``max_delay_ms``.
    """

    def __init__(
        self,
        initial_delay_ms: float = 2000.0,
        max_delay_ms: float = 30000.0,
        jitter_ratio: float = 0.2,
        backoff_factor: float = 2.0
    ):
        super().__init__(initial_delay_ms, max_delay_ms)
        self.jitter_ratio = jitter_ratio
        self.backoff_factor = backoff_factor

    def base_delay(self, attempt: int) -> float:
        """Un-jittered delay after the given failed attempt."""
        if attempt <= 1:
            return self.initial_delay_ms
        delay = self.initial_delay_ms * (self.backoff_factor ** (attempt - 1))
        return min(delay, self.max_delay_ms)

    def calculate_delay(self, attempt: int) -> float:
        """Calculate exponentially increasing delay with jitter."""
        delay = self.base_delay(attempt)
        if attempt <= 1 or delay <= 0 or not self.jitter_ratio:
            return delay

        delay *= random.uniform(1 - self.jitter_ratio, 1 + self.jitter_ratio)
        return min(delay, self.max_delay_ms)

    @property
    def name(self) -> str:
        return f"ExponentialBackoff(initial={self.initial_delay_ms}ms, cap={self.max_delay_ms}ms)"
