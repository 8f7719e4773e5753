"""Run one authenticated LinkedIn job search and print the records as JSON lines.

The li_at cookie comes from --cookie or the LI_AT environment variable.
"""
from pathlib import Path
import sys
import os
import asyncio
import argparse
from dataclasses import replace
import logging

# Ensure project root is on path when executing this file directly
ROOT = Path(__file__).resolve().parent.parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scraper.jobfeed.errors import AuthenticationFailed
from scraper.jobfeed.logging_config import setup_logging, log_event
from scraper.jobfeed.orchestrator import SearchOrchestrator
from scraper.jobfeed.settings import load_settings


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description='Collect LinkedIn job cards for one search')
    ap.add_argument('--keywords', type=str, required=True, help='Search keywords')
    ap.add_argument('--location', type=str, default='', help='Search location')
    ap.add_argument('--limit', type=int, default=25, help='Stop once this many records were collected')
    ap.add_argument('--cookie', type=str, help='li_at cookie value (defaults to $LI_AT)')
    ap.add_argument('--headed', action='store_true', help='Show the browser window')
    ap.add_argument('--debug', action='store_true', help='Enable debug logging')
    return ap


async def run(args) -> int:
    logger = logging.getLogger('jobfeed')
    cookie = args.cookie or os.getenv('LI_AT', '')
    settings = load_settings()
    if args.headed:
        settings = replace(settings, headless=False)
    async with SearchOrchestrator(settings=settings) as scraper:
        try:
            await scraper.initialize(cookie)
        except AuthenticationFailed as e:
            logger.error(f"{e} Refresh the li_at cookie from a logged-in browser.")
            log_event('run_complete', status='auth_failed')
            return 2
        jobs = await scraper.search_jobs(args.keywords, args.location, limit=args.limit)
    for job in jobs:
        print(job.model_dump_json())
    logger.info(f"Run complete collected={len(jobs)}")
    log_event('run_complete', status='ok', collected=len(jobs))
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug)
    try:
        return asyncio.run(run(args))
    except KeyboardInterrupt:
        logging.getLogger('jobfeed').info('Interrupted by user')
        return 130
    except Exception as e:
        # ScraperError plus any Playwright or navigation error
        logging.getLogger('jobfeed').error(f"Search failed: {e}", exc_info=args.debug)
        log_event('run_complete', status='error', kind=type(e).__name__)
        return 1


if __name__ == '__main__':
    sys.exit(main())
