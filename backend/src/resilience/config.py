"""
Configuration for the resilience layer.

Defaults match the production service; every field can be overridden
through a ``RESILIENCE_*`` environment variable.
"""
import os
from dataclasses import dataclass, fields


ENV_PREFIX = "RESILIENCE_"


@dataclass
class ResilienceSettings:
    """Process-wide retry and circuit breaker settings."""
    max_retries: int = 5
    initial_delay_ms: float = 2000.0
    max_delay_ms: float = 30000.0
    jitter_ratio: float = 0.2
    failure_threshold: int = 5
    recovery_timeout: float = 60.0  # seconds
    half_open_max_calls: int = 3

    def __post_init__(self):
        if self.max_retries < 1:
            raise ValueError("max_retries must be >= 1")
        if self.failure_threshold < 1:
            raise ValueError("failure_threshold must be >= 1")
        if self.half_open_max_calls < 1:
            raise ValueError("half_open_max_calls must be >= 1")
        if not 0 <= self.jitter_ratio < 1:
            raise ValueError("jitter_ratio must be in [0, 1)")
        if self.initial_delay_ms < 0 or self.max_delay_ms < 0 or self.recovery_timeout < 0:
            raise ValueError("delays and timeouts must be non-negative")

    @classmethod
    def from_env(cls, environ=None) -> 'ResilienceSettings':
        """Build settings from ``RESILIENCE_*`` environment variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for field in fields(cls):
            raw = environ.get(f"{ENV_PREFIX}{field.name.upper()}")
            if raw is None or raw == "":
                continue
            caster = int if field.type in (int, "int") else float
            try:
                values[field.name] = caster(raw)
            except ValueError as e:
                raise ValueError(
                    f"Invalid value for {ENV_PREFIX}{field.name.upper()}: {raw!r}"
                ) from e
        return cls(**values)
