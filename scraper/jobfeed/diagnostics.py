"""Diagnostic screenshots.

Captures are numbered with a process-lifetime counter (``00001_page.png``,
``00002_page.png`` ...) so a run's screenshots sort in the order they were taken.
A capture must never change the outcome of the operation that requested it.
"""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .logging_config import log_event

logger = logging.getLogger('jobfeed.diagnostics')

PageProvider = Callable[[], Optional[Any]]


@runtime_checkable
class DiagnosticSink(Protocol):
    async def capture(self, label: str, page: Optional[Any] = None) -> None:  # pragma: no cover - interface definition
        ...


class NullDiagnostics:
    """Sink that only logs the label."""

    async def capture(self, label: str, page: Optional[Any] = None) -> None:
        logger.info(f"[diag] {label}")


class ScreenshotDiagnostics:
    def __init__(self, output_dir: Path | str = 'screenshots', page_provider: Optional[PageProvider] = None):
        self.output_dir = Path(output_dir)
        self._page_provider = page_provider
        self._counter = 1

    @property
    def counter(self) -> int:
        return self._counter

    def bind(self, page_provider: PageProvider) -> None:
        self._page_provider = page_provider

    def _next_path(self) -> Path:
        path = self.output_dir / f"{self._counter:05d}_page.png"
        self._counter += 1
        return path

    async def capture(self, label: str = 'Taking screenshot...', page: Optional[Any] = None) -> None:
        """Screenshot `page` (or the provider's page) under the next sequence number."""
        logger.info(f"[diag] {label}")
        path = self._next_path()
        if page is None and self._page_provider is not None:
            page = self._page_provider()
        if page is None:
            logger.debug(f"No active page; skipped screenshot {path.name}")
            return
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            await page.screenshot(path=str(path), full_page=True)
            log_event('diagnostics_saved', label=label, screenshot=str(path))
        except Exception:
            logger.debug(f"Failed to save screenshot {path.name}", exc_info=True)


async def capture_safely(sink: DiagnosticSink, label: str, page: Optional[Any] = None) -> None:
    """Run `sink.capture`; a failing sink is logged and never reaches the caller."""
    try:
        await sink.capture(label, page=page)
    except Exception:
        logger.debug(f"Diagnostic sink {type(sink).__name__} failed on '{label}'", exc_info=True)
