"""Playwright-backed BrowserSession (sync API)."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..config.settings import Settings, settings as default_settings
from .session import BrowserSession, ElementHandle, MouseButton, SessionError

if TYPE_CHECKING:
    from playwright.sync_api import Browser, BrowserContext, Page, Playwright
    from playwright.sync_api import ElementHandle as PlaywrightElementHandle

logger = logging.getLogger(__name__)

_BROWSER_TYPES = ("chromium", "firefox", "webkit")


@contextmanager
def _driver_errors(operation: str) -> Iterator[None]:
    """Re-raise Playwright failures as SessionError."""
    try:
        yield
    except PlaywrightError as e:
        raise SessionError(f"{operation} failed: {e.message}") from e


class PlaywrightElement(ElementHandle):
    def __init__(self, handle: PlaywrightElementHandle) -> None:
        self._handle = handle

    def click(self) -> None:
        with _driver_errors("click"):
            self._handle.click()

    def click_with_button(self, button: MouseButton) -> None:
        with _driver_errors(f"{button} click"):
            self._handle.click(button=button)

    def double_click(self) -> None:
        with _driver_errors("double click"):
            self._handle.dblclick()

    def hover(self) -> None:
        with _driver_errors("hover"):
            self._handle.hover()

    def set_value(self, text: str) -> None:
        with _driver_errors("fill"):
            self._handle.fill(text)

    def get_attribute(self, name: str) -> str | None:
        with _driver_errors(f"read attribute {name!r}"):
            return self._handle.get_attribute(name)

    def get_text(self) -> str | None:
        with _driver_errors("read text"):
            return self._handle.text_content()

    def is_checked(self) -> bool:
        with _driver_errors("read checked state"):
            return self._handle.is_checked()


class PlaywrightSession(BrowserSession):
    """Owns one Playwright instance, browser, context and page.

    Usage:
        session = PlaywrightSession.launch()
        try:
            session.navigate("https://example.com")
        finally:
            session.close()
    """

    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ) -> None:
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page = page
        self._closed = False

    @classmethod
    def launch(cls, config: Settings | None = None) -> PlaywrightSession:
        """Start Playwright and open a fresh browser, context and page.

        Anything acquired before a failure is released again.
        """
        config = config or default_settings
        if config.browser not in _BROWSER_TYPES:
            raise SessionError(
                f"unsupported browser {config.browser!r} (expected one of {', '.join(_BROWSER_TYPES)})"
            )

        playwright = browser = context = None
        try:
            playwright = sync_playwright().start()
            browser = getattr(playwright, config.browser).launch(
                headless=config.headless, slow_mo=config.slow_mo_ms
            )
            context = browser.new_context()
            page = context.new_page()
            page.set_default_timeout(config.default_timeout_ms)
        except PlaywrightError as e:
            _release(context, browser, playwright)
            raise SessionError(
                f"browser launch failed: {e.message} "
                f"(is the browser installed? run `playwright install {config.browser}`)"
            ) from e

        logger.info(
            "Launched %s (headless=%s, timeout=%dms)",
            config.browser,
            config.headless,
            config.default_timeout_ms,
        )
        return cls(playwright, browser, context, page)

    @property
    def page(self) -> Page:
        if self._closed:
            raise SessionError("session is closed")
        return self._page

    def navigate(self, url: str) -> None:
        with _driver_errors(f"navigation to {url}"):
            self.page.goto(url)

    def find_all(self, selector: str) -> list[ElementHandle]:
        with _driver_errors(f"query {selector!r}"):
            handles = self.page.query_selector_all(selector)
        return [PlaywrightElement(h) for h in handles]

    def find_one(self, selector: str) -> ElementHandle | None:
        with _driver_errors(f"query {selector!r}"):
            handle = self.page.query_selector(selector)
        return PlaywrightElement(handle) if handle else None

    def select_option(self, selector: str, value: str) -> list[str]:
        # A plain string matches either the option value or its label.
        with _driver_errors(f"select {value!r} in {selector!r}"):
            return self.page.select_option(selector, value)

    def evaluate(self, script: str) -> object:
        with _driver_errors("script evaluation"):
            return self.page.evaluate(script)

    def wait(self, milliseconds: int) -> None:
        with _driver_errors("wait"):
            self.page.wait_for_timeout(milliseconds)

    def fetch_binary(self, url: str) -> bytes:
        # Not page.goto: attachment responses never render ("Download is starting").
        with _driver_errors(f"download of {url}"):
            response = self.page.context.request.get(url)
            try:
                if not response.ok:
                    raise SessionError(
                        f"download of {url} failed: HTTP {response.status} {response.status_text}"
                    )
                return response.body()
            finally:
                response.dispose()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        with _suppress_close_error("page"):
            self._page.close(run_before_unload=False)
        _release(self._context, self._browser, self._playwright)
        logger.debug("Browser session closed")


@contextmanager
def _suppress_close_error(what: str) -> Iterator[None]:
    try:
        yield
    except PlaywrightError as e:
        logger.warning("Failed to close %s: %s", what, e.message)


def _release(context, browser, playwright) -> None:
    if context is not None:
        with _suppress_close_error("context"):
            context.close()
    if browser is not None:
        with _suppress_close_error("browser"):
            browser.close()
    if playwright is not None:
        with _suppress_close_error("playwright"):
            playwright.stop()


def launch_session(config: Settings | None = None) -> PlaywrightSession:
    """Default session factory used by the runner."""
    return PlaywrightSession.launch(config)
