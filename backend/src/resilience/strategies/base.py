"""
Base class for backoff strategies.
"""
from abc import ABC, abstractmethod


class BaseStrategy(ABC):
    """Computes the wait between retry attempts, in milliseconds."""

    def __init__(self, initial_delay_ms: float, max_delay_ms: float = 30000.0):
        if initial_delay_ms < 0:
            raise ValueError("initial_delay_ms must be non-negative")
        self.initial_delay_ms = initial_delay_ms
        self.max_delay_ms = max_delay_ms

    @abstractmethod
    def calculate_delay(self, attempt: int) -> float:
        """
        Calculate delay after a failed attempt.

        Args:
            attempt: Number of the attempt that just failed (1-indexed)

        Returns:
            Delay in milliseconds
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Strategy name for logging."""
        pass
