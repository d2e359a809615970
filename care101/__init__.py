"""Mini README: Core package initializer for the Care101 doctor services.

Care101 tracks doctors' hospital income ledgers, surgery records and
subscription plans. This module exposes the logging factory and the shared
error types so callers can import them without knowing the module layout.
"""

from .errors import NotFoundError, QuotaExceededError
from .logging_utils import get_logger

__all__ = ["NotFoundError", "QuotaExceededError", "get_logger"]
