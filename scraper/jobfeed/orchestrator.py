from __future__ import annotations
"""Search state machine: authenticate -> search -> (load, extract, paginate)* -> done.

IMPORTANT: Automated collection from LinkedIn may violate their Terms of Service.
Use at your own risk and keep volume low.
"""
import logging
import time
from enum import Enum
from typing import List, Optional
from urllib.parse import quote

from .constants import JOBS_SEARCH_URL
from .convergence import ConvergenceDetector
from .diagnostics import DiagnosticSink, ScreenshotDiagnostics, capture_safely
from .extractor import JobCardExtractor, RecordExtractor
from .logging_config import bind_event_context, clear_event_context, log_event
from .models import JobCard
from .pagination import PaginationController
from .session import BrowserLauncher, SessionManager
from .settings import Settings, load_settings

logger = logging.getLogger('jobfeed.orchestrator')


class SearchState(str, Enum):
    UNINITIALIZED = 'uninitialized'
    AUTHENTICATED = 'authenticated'
    SEARCHING = 'searching'
    LOADING = 'loading'
    EXTRACTING = 'extracting'
    PAGINATING = 'paginating'
    DONE = 'done'


def build_search_url(keywords: str, location: str) -> str:
    return f"{JOBS_SEARCH_URL}?keywords={quote(keywords, safe='')}&location={quote(location, safe='')}"


class SearchOrchestrator:
    """Drives one authenticated session through a quota-bounded job search.

    Collaborators are injectable so tests can swap the browser, the extractor
    and the diagnostics sink without touching the control flow.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        launcher: Optional[BrowserLauncher] = None,
        diagnostics: Optional[DiagnosticSink] = None,
        extractor: Optional[RecordExtractor] = None,
        detector: Optional[ConvergenceDetector] = None,
    ):
        self.settings = settings or load_settings()
        self.diagnostics = diagnostics or ScreenshotDiagnostics(self.settings.screenshot_dir)
        self.session = SessionManager(self.settings, self.diagnostics, launcher)
        if isinstance(self.diagnostics, ScreenshotDiagnostics):
            self.diagnostics.bind(self.session.current_page)
        self.detector = detector or ConvergenceDetector(self.settings)
        self.extractor = extractor or JobCardExtractor()
        self.paginator = PaginationController(self.session.current_page)
        self.state = SearchState.UNINITIALIZED

    async def initialize(self, cookie_value: str) -> None:
        self.state = SearchState.UNINITIALIZED
        await self.session.initialize(cookie_value)
        self.state = SearchState.AUTHENTICATED

    async def search_jobs(self, keywords: str, location: str, limit: int = 25) -> List[JobCard]:
        page = self.session.page  # NotInitialized before any navigation
        self.state = SearchState.SEARCHING
        url = build_search_url(keywords, location)
        logger.info(f"Starting search: keywords='{keywords}' location='{location}' limit={limit}")
        bind_event_context(keywords=keywords, location=location)
        log_event('search_start', limit=limit)
        start_time = time.time()
        try:
            await page.goto(url, wait_until='load')
            await capture_safely(self.diagnostics, 'Search jobs page')
            results = await self._collect(limit)
            elapsed = round(time.time() - start_time, 2)
            logger.info(f"Completed search: collected={len(results)} cached={len(self.extractor.cached_jobs)} elapsed={elapsed}s")
            log_event('search_complete', collected=len(results), cached=len(self.extractor.cached_jobs), elapsed_s=elapsed)
        except Exception as e:
            await capture_safely(self.diagnostics, 'Search failed')
            log_event('error', stage=self.state.value, message=str(e))
            raise
        finally:
            self.state = SearchState.DONE
            clear_event_context()
        return results

    async def _collect(self, limit: int) -> List[JobCard]:
        results: List[JobCard] = []
        processed_jobs = 0
        cycle = 0
        while processed_jobs < limit:
            cycle += 1
            self.state = SearchState.LOADING
            load = await self.detector.load_jobs(self.session.page)
            logger.info(f"Cycle {cycle}: total_jobs={load.total_jobs}")
            if not load.success:
                # A list that never converged ends the whole search, partial results included
                await capture_safely(self.diagnostics, 'No jobs found')
                log_event('search_abandoned', cycle=cycle, discarded=len(results))
                return []
            self.state = SearchState.EXTRACTING
            batch = await self.extractor.extract_batch(self.session.page)
            processed_jobs += len(batch)
            results.extend(batch)
            for job in batch:
                logger.info(f"  {job.job_id} {job}")
            if processed_jobs >= limit:
                await capture_safely(self.diagnostics, 'Job limit reached')
                break
            self.state = SearchState.PAGINATING
            await self.paginator.advance(self.settings.page_size)
        return results

    async def close(self) -> None:
        await self.session.close()
        self.state = SearchState.UNINITIALIZED

    async def __aenter__(self) -> 'SearchOrchestrator':
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
