from __future__ import annotations
"""Scroll a lazily rendered job list until it stops growing.

Convergence means two consecutive polls, separated by the settle interval,
return the same item count. The settle interval is a fixed heuristic: if the
site renders slower than it, convergence is declared early.
"""
import asyncio
import logging
from typing import Any, List, Optional, Sequence

from .constants import JOB_CARD_SELECTOR, JOB_CARD_SKELETON_SELECTORS
from .errors import OperationTimeout, RetryExhausted
from .logging_config import log_event
from .models import LoadResult, RetryConfig
from .retry import RetryPolicy
from .settings import Settings, load_settings

logger = logging.getLogger('jobfeed.convergence')


class ConvergenceDetector:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        item_selector: str = JOB_CARD_SELECTOR,
        skeleton_selectors: Sequence[str] = JOB_CARD_SKELETON_SELECTORS,
        retry_policy: Optional[RetryPolicy] = None,
    ):
        self.settings = settings or load_settings()
        self.item_selector = item_selector
        self.skeleton_selectors = list(skeleton_selectors)
        self.retry_policy = retry_policy or RetryPolicy('load_jobs')
        self.retry_config = RetryConfig(
            max_attempts=self.settings.load_max_attempts,
            delay_ms=self.settings.load_delay_ms,
            timeout_ms=self.settings.load_timeout_ms,
        )

    async def wait_for_skeletons(self, page: Any) -> List[BaseException]:
        """Wait (best effort, concurrently) for every placeholder to detach.

        Returns the individual failures, which callers are free to ignore.
        """
        outcomes = await asyncio.gather(
            *(page.wait_for_selector(sel, state='detached', timeout=self.settings.skeleton_timeout_ms)
              for sel in self.skeleton_selectors),
            return_exceptions=True,
        )
        failures = [o for o in outcomes if isinstance(o, BaseException)]
        if failures:
            logger.debug(f"{len(failures)} skeleton probe(s) did not settle; continuing")
        return failures

    async def _load_once(self, page: Any) -> LoadResult:
        await self.wait_for_skeletons(page)
        items = page.locator(self.item_selector)
        count = await items.count()
        last_item = items.last
        polls = 0
        while True:
            await last_item.scroll_into_view_if_needed()
            await page.wait_for_timeout(self.settings.settle_ms)
            current = await items.count()
            polls += 1
            if current == count:
                break
            logger.debug(f"List grew {count} -> {current}; scrolling again")
            count = current
            last_item = items.last
        logger.debug(f"List converged at {count} items after {polls} polls")
        return LoadResult(success=True, total_jobs=count)

    async def load_jobs(self, page: Any) -> LoadResult:
        """Run the convergence pass under the retry budget.

        Gives back ``LoadResult(success=False)`` once the retry policy gives up.
        """
        try:
            result = await self.retry_policy.execute(lambda: self._load_once(page), self.retry_config)
        except (RetryExhausted, OperationTimeout) as e:
            logger.error(f"Job list did not converge: {e}")
            log_event('load_failed', error=str(e), kind=type(e).__name__)
            return LoadResult(success=False, total_jobs=0)
        log_event('load_converged', total_jobs=result.total_jobs)
        return result
