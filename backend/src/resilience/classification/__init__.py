"""Error classification for the resilience layer."""
from .categories import CategorizedError, ErrorPattern, extract_status_code
from .classifier import ErrorCategorizer

__all__ = [
    "ErrorCategorizer",
    "ErrorPattern",
    "CategorizedError",
    "extract_status_code",
]
