"""Browser session abstractions consumed by the action executor."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Literal

MouseButton = Literal["left", "right", "middle"]


class SessionError(RuntimeError):
    """Raised by a session when the underlying browser driver fails."""


class ElementHandle(ABC):
    """A resolved element on the session's page."""

    @abstractmethod
    def click(self) -> None: ...

    @abstractmethod
    def click_with_button(self, button: MouseButton) -> None: ...

    @abstractmethod
    def double_click(self) -> None: ...

    @abstractmethod
    def hover(self) -> None:
        """Move the pointer over the element."""

    @abstractmethod
    def set_value(self, text: str) -> None:
        """Replace the element's value (form fields)."""

    @abstractmethod
    def get_attribute(self, name: str) -> str | None: ...

    @abstractmethod
    def get_text(self) -> str | None: ...

    @abstractmethod
    def is_checked(self) -> bool: ...


class BrowserSession(ABC):
    """One page in one browser context, owned by a single task execution."""

    @abstractmethod
    def navigate(self, url: str) -> None: ...

    @abstractmethod
    def find_all(self, selector: str) -> Sequence[ElementHandle]: ...

    @abstractmethod
    def find_one(self, selector: str) -> ElementHandle | None: ...

    @abstractmethod
    def select_option(self, selector: str, value: str) -> list[str]:
        """Select an option in a <select> and return the values now selected."""

    @abstractmethod
    def evaluate(self, script: str) -> object: ...

    @abstractmethod
    def wait(self, milliseconds: int) -> None: ...

    @abstractmethod
    def fetch_binary(self, url: str) -> bytes:
        """Fetch url with the page's cookies and return the response body."""

    @abstractmethod
    def close(self) -> None:
        """Release page, context and browser. Safe to call more than once."""
