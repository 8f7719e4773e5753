"""Error taxonomy for the search session.

Every failure the orchestrator can surface derives from `ScraperError` so
callers can separate scraping problems from programming errors, and the
subclasses let a CLI print a credential-specific message for
`AuthenticationFailed` without string matching.
"""
from __future__ import annotations
from typing import Any, Optional


class ScraperError(Exception):
    """Base class for all jobfeed errors."""


class NotInitialized(ScraperError):
    """An operation needed a browser session before `initialize` produced one."""


class AuthenticationFailed(ScraperError):
    """The logged-in marker never appeared after injecting the auth cookie."""


class PageUnavailable(ScraperError):
    """Pagination was requested while no page is active."""


class OperationTimeout(ScraperError, TimeoutError):
    """A bounded operation (all retry attempts combined) ran past its window."""

    def __init__(self, message: str, timeout_ms: int):
        super().__init__(message)
        self.timeout_ms = timeout_ms


class RetryExhausted(ScraperError):
    """All retry attempts failed before the overall timeout elapsed."""

    def __init__(self, message: str, attempts: int, last_error: Optional[BaseException] = None, last_result: Any = None):
        super().__init__(message)
        self.attempts = attempts
        self.last_error = last_error
        self.last_result = last_result
