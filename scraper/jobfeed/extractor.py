from __future__ import annotations
"""Turn rendered job cards into `JobCard` records.

Cards are keyed by their LinkedIn job id; a card already in `cached_jobs` is
not returned again, so each batch only holds records that became visible since
the previous call.
"""
import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable
from urllib.parse import urljoin

from .constants import (
    CARD_COMPANY_SELECTORS,
    CARD_LINK_SELECTOR,
    CARD_LOCATION_SELECTORS,
    CARD_TITLE_SELECTORS,
    JOB_CARD_SELECTOR,
    JOB_VIEW_URL,
)
from .logging_config import log_event
from .models import JobCard

logger = logging.getLogger('jobfeed.extractor')


@runtime_checkable
class RecordExtractor(Protocol):
    cached_jobs: Dict[str, JobCard]

    async def extract_batch(self, page: Any) -> List[JobCard]:  # pragma: no cover - interface definition
        ...


async def _first_text(card: Any, selectors: Sequence[str]) -> Optional[str]:
    for sel in selectors:
        try:
            el = await card.query_selector(sel)
            if not el:
                continue
            txt = ((await el.inner_text()) or '').strip()
        except Exception:
            logger.debug(f"Selector {sel} failed on card", exc_info=True)
            continue
        if txt:
            return txt.splitlines()[0].strip()
    return None


async def _job_id(card: Any) -> Optional[str]:
    for attr in ('data-occludable-job-id', 'data-job-id'):
        jid = ((await card.get_attribute(attr)) or '').strip()
        if jid:
            return jid
    return None


class JobCardExtractor:
    def __init__(self, card_selector: str = JOB_CARD_SELECTOR):
        self.card_selector = card_selector
        self.cached_jobs: Dict[str, JobCard] = {}

    async def _parse_card(self, card: Any, job_id: str, base_url: str) -> JobCard:
        href = None
        try:
            link = await card.query_selector(CARD_LINK_SELECTOR)
            if link:
                href = await link.get_attribute('href')
        except Exception:
            logger.debug(f"No link for job {job_id}", exc_info=True)
        url = urljoin(base_url, href.split('?')[0]) if href else JOB_VIEW_URL.format(job_id=job_id)
        return JobCard(
            job_id=job_id,
            title=await _first_text(card, CARD_TITLE_SELECTORS),
            company_name=await _first_text(card, CARD_COMPANY_SELECTORS),
            location=await _first_text(card, CARD_LOCATION_SELECTORS),
            url=url,
        )

    async def extract_batch(self, page: Any) -> List[JobCard]:
        batch: List[JobCard] = []
        cards = await page.query_selector_all(self.card_selector)
        for card in cards:
            job_id = await _job_id(card)
            if not job_id or job_id in self.cached_jobs:
                continue
            job = await self._parse_card(card, job_id, page.url)
            self.cached_jobs[job_id] = job
            batch.append(job)
            logger.debug(f"Extracted job {job_id} {job.company_name} - {job.title}")
        logger.info(f"Extracted {len(batch)} new jobs ({len(cards)} cards on page, {len(self.cached_jobs)} cached)")
        log_event('batch_extracted', new=len(batch), cards=len(cards), cached=len(self.cached_jobs))
        return batch
