"""Server-side pagination through the `start` offset query parameter."""
from __future__ import annotations
import logging
from typing import Any, Callable, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from .errors import PageUnavailable

logger = logging.getLogger('jobfeed.pagination')

PAGE_PARAM = 'start'
DEFAULT_PAGE_SIZE = 25


def current_offset(url: str) -> int:
    """Offset in `url`; absent, malformed or negative values count as 0."""
    params = dict(parse_qsl(urlparse(url).query, keep_blank_values=True))
    try:
        offset = int(params.get(PAGE_PARAM, '0'))
    except ValueError:
        return 0
    return max(0, offset)


def next_page_url(url: str, page_size: int = DEFAULT_PAGE_SIZE) -> str:
    """Return `url` with its offset advanced by `page_size`, other params untouched."""
    if page_size < 1:
        raise ValueError('page_size must be >= 1')
    parsed = urlparse(url)
    pairs = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != PAGE_PARAM]
    pairs.append((PAGE_PARAM, str(current_offset(url) + page_size)))
    return urlunparse(parsed._replace(query=urlencode(pairs)))


class PaginationController:
    def __init__(self, page_provider: Callable[[], Optional[Any]]):
        self._page_provider = page_provider

    async def advance(self, page_size: int = DEFAULT_PAGE_SIZE) -> str:
        page = self._page_provider()
        if page is None:
            raise PageUnavailable('Failed to load page: no active page to paginate')
        url = next_page_url(page.url, page_size)
        logger.info(f"Paginating to offset {current_offset(url)}")
        await page.goto(url, wait_until='load')
        return url
