"""
Fixed delay retry strategy.
"""
from .base import BaseStrategy


class FixedDelayStrategy(BaseStrategy):
    """
    Fixed delay strategy.

    Same delay between all retry attempts.
    """

    def __init__(self, delay_ms: float = 250.0):
        super().__init__(delay_ms, delay_ms)

    def calculate_delay(self, attempt: int) -> float:
        """Return fixed delay regardless of attempt number."""
        return self.initial_delay_ms

    @property
    def name(self) -> str:
        return f"FixedDelay(delay={self.initial_delay_ms}ms)"
