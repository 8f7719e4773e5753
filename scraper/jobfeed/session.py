from __future__ import annotations
"""Authenticated browser session.

The session is either `Uninitialized` or `Active(handle)`; the page is only
reachable through `SessionManager.page`, which raises `NotInitialized` in the
first state instead of handing out a ``None``.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Protocol, Union

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .constants import ACTIVE_MENU_SELECTOR, AUTH_COOKIE_DOMAIN, AUTH_COOKIE_NAME, AUTH_COOKIE_PATH, HOME_URL
from .diagnostics import DiagnosticSink, NullDiagnostics, capture_safely
from .errors import AuthenticationFailed, NotInitialized
from .logging_config import log_event
from .settings import Settings, load_settings

logger = logging.getLogger('jobfeed.session')


class BrowserLauncher(Protocol):
    async def launch(self, headless: bool) -> Any:  # pragma: no cover - interface definition
        ...

    async def stop(self) -> None:  # pragma: no cover - interface definition
        ...


class PlaywrightLauncher:
    """Starts the Playwright driver and launches Chromium."""

    def __init__(self):
        self._driver = None

    async def launch(self, headless: bool) -> Any:
        # Lazy import: the driver is only needed when a browser is actually launched
        from playwright.async_api import async_playwright
        self._driver = await async_playwright().start()
        try:
            return await self._driver.chromium.launch(headless=headless)
        except Exception:
            await self.stop()
            raise

    async def stop(self) -> None:
        driver, self._driver = self._driver, None
        if driver is not None:
            await driver.stop()


@dataclass(frozen=True)
class SessionHandle:
    browser: Any
    context: Any
    page: Any


@dataclass(frozen=True)
class Uninitialized:
    pass


@dataclass(frozen=True)
class Active:
    handle: SessionHandle


SessionState = Union[Uninitialized, Active]

UNINITIALIZED = Uninitialized()


class SessionManager:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        diagnostics: Optional[DiagnosticSink] = None,
        launcher: Optional[BrowserLauncher] = None,
    ):
        self.settings = settings or load_settings()
        self.diagnostics = diagnostics or NullDiagnostics()
        self.launcher = launcher or PlaywrightLauncher()
        self._state: SessionState = UNINITIALIZED

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def authenticated(self) -> bool:
        return isinstance(self._state, Active)

    @property
    def page(self) -> Any:
        if isinstance(self._state, Active):
            return self._state.handle.page
        raise NotInitialized('Scraper not initialized; call initialize() first')

    def current_page(self) -> Optional[Any]:
        if isinstance(self._state, Active):
            return self._state.handle.page
        return None

    async def _is_logged_in(self, page: Any) -> bool:
        marker = page.locator(ACTIVE_MENU_SELECTOR).first
        try:
            await marker.wait_for(state='visible', timeout=self.settings.login_check_timeout_ms)
        except PlaywrightTimeoutError:
            return False
        return await marker.is_visible()

    async def initialize(self, auth_token: str) -> None:
        if isinstance(self._state, Active):
            logger.info("Session already active; closing it before re-initializing")
            await self.close()
        if not auth_token or not auth_token.strip():
            await capture_safely(self.diagnostics, 'Authentication failed')
            raise AuthenticationFailed('Authentication failed: empty li_at cookie')
        logger.info("Connecting to a scraping browser")
        browser = await self.launcher.launch(headless=self.settings.headless)
        try:
            logger.info("Connected, navigating...")
            context = await browser.new_context()
            await context.add_cookies([{
                'name': AUTH_COOKIE_NAME,
                'value': auth_token.strip(),
                'domain': AUTH_COOKIE_DOMAIN,
                'path': AUTH_COOKIE_PATH,
            }])
            page = await context.new_page()
            await page.goto(HOME_URL, wait_until='load')
            if not await self._is_logged_in(page):
                await capture_safely(self.diagnostics, 'Authentication failed', page=page)
                log_event('auth_failed', url=getattr(page, 'url', None))
                raise AuthenticationFailed('Authentication failed. Please check your li_at cookie.')
        except BaseException:
            await self._teardown(browser)
            raise
        self._state = Active(SessionHandle(browser=browser, context=context, page=page))
        logger.info("Successfully authenticated")
        log_event('auth_ok')
        await capture_safely(self.diagnostics, 'Home page')

    async def _teardown(self, browser: Any) -> None:
        try:
            await browser.close()
        except Exception as e:
            logger.warning(f"Error closing browser: {e}")
        try:
            await self.launcher.stop()
        except Exception as e:
            logger.warning(f"Error stopping browser driver: {e}")

    async def close(self) -> None:
        state, self._state = self._state, UNINITIALIZED
        if not isinstance(state, Active):
            return
        logger.info("Closing browser session")
        await self._teardown(state.handle.browser)
