"""Action executor: maps each task action onto browser session operations.

`ActionExecutor.execute` never raises for an action failure. It returns an
`ActionResult` whose `error` is one of the taxonomy errors in
`scrapeflow.core.errors`, so the caller decides how a failure ends the task.

Local tolerances kept on purpose:
- Navigate succeeds without doing anything when the selector matches nothing
  or the attribute cannot be read. Only a failed navigation is an error.
- Wait, and the settle delay after Login, never fail.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import assert_never

from ...adapters.session import BrowserSession, ElementHandle, SessionError
from ...runtime.storage import write_bytes
from ..errors import (
    ElementError,
    ExecutionError,
    IoError,
    NavigationError,
    ScriptError,
)
from ..ir.model import (
    Action,
    Click,
    DoubleClick,
    DownloadFile,
    Extract,
    FillCheckbox,
    GoTo,
    Hover,
    Input,
    Login,
    Navigate,
    RightClick,
    RunScript,
    SelectDropdown,
    Wait,
)

logger = logging.getLogger(__name__)

DEFAULT_LOGIN_SETTLE_MS = 2000


@dataclass
class ActionResult:
    """Outcome of one action. `value` is only set by Extract."""

    ok: bool
    value: str | None = None
    error: ExecutionError | None = None

    @classmethod
    def success(cls, value: str | None = None) -> ActionResult:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ExecutionError) -> ActionResult:
        return cls(ok=False, error=error)


@contextmanager
def _mapped(error_cls: type[ExecutionError]) -> Iterator[None]:
    """Turn a driver failure into the given taxonomy error."""
    try:
        yield
    except SessionError as e:
        raise error_cls(str(e)) from e


class ActionExecutor:
    """Runs single actions against a BrowserSession."""

    def __init__(self, login_settle_ms: int = DEFAULT_LOGIN_SETTLE_MS) -> None:
        """
        Args:
            login_settle_ms: Pause after submitting a Login form. The page is not
                inspected for success; this only gives redirects time to finish.
        """
        self.login_settle_ms = login_settle_ms

    def execute(self, action: Action, session: BrowserSession) -> ActionResult:
        logger.debug("Executing %r", action)
        try:
            value = self._dispatch(action, session)
        except ExecutionError as e:
            logger.warning("%s failed: %s", type(action).__name__, e.message)
            return ActionResult.failure(e)
        return ActionResult.success(value)

    def _dispatch(self, action: Action, session: BrowserSession) -> str | None:  # noqa: PLR0911
        match action:
            case GoTo(url=url):
                self._goto(session, url)
            case Click(selector=selector):
                el = self._require(session, selector)
                with _mapped(ElementError):
                    el.click()
            case Input(selector=selector, text=text):
                self._fill(session, selector, text)
            case Extract(selector=selector, attribute=attribute):
                return self._extract(session, selector, attribute)
            case Wait(milliseconds=ms):
                self._pause(session, ms)
            case Login():
                self._login(session, action)
            case Navigate(selector=selector, attribute=attribute):
                self._follow(session, selector, attribute)
            case FillCheckbox(selector=selector, checked=checked):
                self._set_checkbox(session, selector, checked)
            case SelectDropdown(selector=selector, option=option):
                with _mapped(ElementError):
                    selected = session.select_option(selector, option)
                if not selected:
                    raise ElementError(f"option {option!r} was not selected in {selector!r}")
            case Hover(selector=selector):
                el = self._require(session, selector)
                with _mapped(ElementError):
                    el.hover()
            case DoubleClick(selector=selector):
                el = self._require(session, selector)
                with _mapped(ElementError):
                    el.double_click()
            case RightClick(selector=selector):
                el = self._require(session, selector)
                with _mapped(ElementError):
                    el.click_with_button("right")
            case RunScript(script=script):
                # Script results are not collected.
                with _mapped(ScriptError):
                    session.evaluate(script)
            case DownloadFile(url=url, dist_path=dist_path):
                self._download(session, url, dist_path)
            case _:
                assert_never(action)
        return None

    # === Helpers ===

    def _goto(self, session: BrowserSession, url: str) -> None:
        with _mapped(NavigationError):
            session.navigate(url)

    def _require(self, session: BrowserSession, selector: str) -> ElementHandle:
        with _mapped(ElementError):
            el = session.find_one(selector)
        if el is None:
            raise ElementError(f"no element matches {selector!r}")
        return el

    def _fill(self, session: BrowserSession, selector: str, text: str) -> None:
        el = self._require(session, selector)
        with _mapped(ElementError):
            el.set_value(text)

    def _pause(self, session: BrowserSession, milliseconds: int) -> None:
        try:
            session.wait(milliseconds)
        except SessionError as e:
            logger.warning("Wait of %dms interrupted: %s", milliseconds, e)

    def _extract(
        self, session: BrowserSession, selector: str, attribute: str | None
    ) -> str | None:
        """Return the first non-empty value among the elements matching selector.

        Elements after the first one that yields a value are not read.
        """
        with _mapped(ElementError):
            elements = session.find_all(selector)
            for el in elements:
                value = el.get_attribute(attribute) if attribute is not None else el.get_text()
                if value:
                    logger.info("Extracted from %r: %s", selector, value)
                    return value
        logger.info("Nothing extracted from %r (%d match(es))", selector, len(elements))
        return None

    def _login(self, session: BrowserSession, action: Login) -> None:
        self._goto(session, action.url)
        self._fill(session, action.username_selector, action.username)
        self._fill(session, action.password_selector, action.password)
        submit = self._require(session, action.submit_selector)
        with _mapped(ElementError):
            submit.click()
        self._pause(session, self.login_settle_ms)

    def _follow(self, session: BrowserSession, selector: str, attribute: str) -> None:
        """Navigate to the URL held in attribute of the element matching selector.

        A missing element, an unreadable attribute, or an absent or empty
        attribute value is a no-op. An empty href is skipped rather than
        handed to the browser as a navigation target.
        """
        with _mapped(ElementError):
            el = session.find_one(selector)
        if el is None:
            logger.info("Navigate: no element matches %r, skipping", selector)
            return
        try:
            href = el.get_attribute(attribute)
        except SessionError as e:
            logger.info("Navigate: cannot read %r on %r (%s), skipping", attribute, selector, e)
            return
        if not href:
            logger.info("Navigate: %r has no %r attribute, skipping", selector, attribute)
            return
        self._goto(session, href)

    def _set_checkbox(self, session: BrowserSession, selector: str, checked: bool) -> None:
        box = self._require(session, selector)
        with _mapped(ElementError):
            if box.is_checked() != checked:
                box.click()

    def _download(self, session: BrowserSession, url: str, dist_path: str) -> None:
        with _mapped(NavigationError):
            body = session.fetch_binary(url)
        try:
            path = write_bytes(dist_path, body)
        except OSError as e:
            raise IoError(f"cannot write {dist_path}: {e}") from e
        logger.info("Downloaded %s (%d bytes) to %s", url, len(body), path)
