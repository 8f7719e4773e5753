"""Centralized settings with environment + runtime config overlay.
Provides typed accessors so timing heuristics are not scattered as magic numbers.
"""
from __future__ import annotations
from pathlib import Path
import os, yaml
from dataclasses import dataclass

_RUNTIME_CACHE: dict | None = None

CONFIG_DIR = Path(__file__).resolve().parent.parent / 'config'

def _load_runtime() -> dict:
    global _RUNTIME_CACHE
    if _RUNTIME_CACHE is None:
        cfg_file = CONFIG_DIR / 'runtime.yml'
        if cfg_file.exists():
            try:
                _RUNTIME_CACHE = yaml.safe_load(cfg_file.read_text(encoding='utf-8')) or {}
            except yaml.YAMLError:
                _RUNTIME_CACHE = {}
        else:
            _RUNTIME_CACHE = {}
    return _RUNTIME_CACHE

def _env_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is not None:
        try:
            return int(v)
        except ValueError:
            return default
    return int(_load_runtime().get(name.lower(), default))

def _env_str(name: str, default: str) -> str:
    v = os.getenv(name)
    if v is not None:
        return v
    return str(_load_runtime().get(name.lower(), default))

def _env_bool(name: str, default: bool) -> bool:
    raw = _env_str(name, '1' if default else '0')
    return raw.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class Settings:
    headless: bool
    page_size: int
    settle_ms: int
    skeleton_timeout_ms: int
    login_check_timeout_ms: int
    load_max_attempts: int
    load_delay_ms: int
    load_timeout_ms: int
    screenshot_dir: Path

def load_settings() -> Settings:
    return Settings(
        headless=_env_bool('SCRAPER_HEADLESS', True),
        page_size=_env_int('SCRAPER_PAGE_SIZE', 25),
        settle_ms=_env_int('SCRAPER_SETTLE_MS', 200),
        skeleton_timeout_ms=_env_int('SCRAPER_SKELETON_TIMEOUT_MS', 3000),
        login_check_timeout_ms=_env_int('SCRAPER_LOGIN_CHECK_TIMEOUT_MS', 5000),
        load_max_attempts=_env_int('SCRAPER_LOAD_MAX_ATTEMPTS', 3),
        load_delay_ms=_env_int('SCRAPER_LOAD_DELAY_MS', 300),
        load_timeout_ms=_env_int('SCRAPER_LOAD_TIMEOUT_MS', 30000),
        screenshot_dir=Path(_env_str('SCRAPER_SCREENSHOT_DIR', 'screenshots')),
    )
