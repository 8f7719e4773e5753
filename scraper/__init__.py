"""Jobfeed package public API."""
from importlib import metadata as _metadata

try:
    __version__ = _metadata.version("jobfeed")
except _metadata.PackageNotFoundError:  # fallback when not installed
    __version__ = "0.1.0"

from .jobfeed.errors import (  # re-export
    AuthenticationFailed,
    NotInitialized,
    OperationTimeout,
    PageUnavailable,
    RetryExhausted,
    ScraperError,
)
from .jobfeed.models import JobCard, RetryConfig  # re-export
from .jobfeed.orchestrator import SearchOrchestrator  # re-export

__all__ = [
    "__version__",
    "AuthenticationFailed",
    "JobCard",
    "NotInitialized",
    "OperationTimeout",
    "PageUnavailable",
    "RetryConfig",
    "RetryExhausted",
    "ScraperError",
    "SearchOrchestrator",
]
