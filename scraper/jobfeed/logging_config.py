"""Console/file logging plus the JSONL event stream.

Every event line carries the process `run_id` and whatever search context was
bound with `bind_event_context`, so the lines of one search can be grepped
together (``jq 'select(.run_id == "...")'``).
"""
from __future__ import annotations
import logging
import os
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
import json
from datetime import datetime, timezone

LOG_DIR = Path(__file__).resolve().parent.parent / 'logs'

STRUCTURED_LOG_FILE = LOG_DIR / 'jobfeed.events.jsonl'

RUN_ID = uuid.uuid4().hex[:12]

_EVENT_CONTEXT: dict = {}


def _file_logs_disabled() -> bool:
    return bool(os.getenv('SCRAPER_DISABLE_FILE_LOGS'))


def _events_disabled() -> bool:
    return bool(os.getenv('SCRAPER_DISABLE_EVENTS'))


def setup_logging(debug: bool = False):
    root = logging.getLogger()
    if root.handlers:
        # already configured
        return
    level = logging.DEBUG if debug else logging.INFO
    root.setLevel(level)
    ch = logging.StreamHandler()
    ch.setFormatter(logging.Formatter('%(levelname)s %(message)s'))
    ch.setLevel(level)
    root.addHandler(ch)
    if not _file_logs_disabled():
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(LOG_DIR / 'jobfeed.log', maxBytes=1_000_000, backupCount=5, encoding='utf-8')
        fh.setFormatter(logging.Formatter(f'%(asctime)s run={RUN_ID} %(levelname)s %(name)s %(message)s'))
        root.addHandler(fh)
    # Playwright's driver chatter drowns the session log at INFO
    for noisy in ('playwright', 'asyncio'):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger('jobfeed').debug(f"Logging configured run_id={RUN_ID} debug={debug}")


def bind_event_context(**fields) -> None:
    """Attach `fields` to every following event until `clear_event_context`."""
    _EVENT_CONTEXT.update(fields)


def clear_event_context() -> None:
    _EVENT_CONTEXT.clear()


def log_event(event: str, **fields):
    """Append a structured JSON event line."""
    if _events_disabled():
        return
    rec = {'ts': datetime.now(timezone.utc).isoformat(timespec='seconds'), 'run_id': RUN_ID, 'event': event}
    rec.update(_EVENT_CONTEXT)
    rec.update(fields)
    try:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        with STRUCTURED_LOG_FILE.open('a', encoding='utf-8') as f:
            f.write(json.dumps(rec, ensure_ascii=False, default=str) + '\n')
    except OSError:
        logging.getLogger('jobfeed.logging').debug(f"Failed to write event '{event}'", exc_info=True)
