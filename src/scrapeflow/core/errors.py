"""Error taxonomy for loading and executing tasks."""

from __future__ import annotations

from typing import Any


class ScrapeFlowError(Exception):
    """Base error for scrapeflow."""


class ParseError(ScrapeFlowError):
    """Task document could not be loaded (bad JSON, unknown action, missing field)."""


class ExecutionError(ScrapeFlowError):
    """An action failed while running against a browser session.

    The runner binds the task name and the position of the failing action
    before handing the error to callers.
    """

    kind = "ExecutionError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.task_name: str | None = None
        self.action_index: int | None = None
        self.action_name: str | None = None

    def bind(self, task_name: str, action_index: int, action_name: str) -> ExecutionError:
        self.task_name = task_name
        self.action_index = action_index
        self.action_name = action_name
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind,
            "message": self.message,
            "task": self.task_name,
            "action_index": self.action_index,
            "action": self.action_name,
        }

    def __str__(self) -> str:
        if self.action_index is None:
            return f"{self.kind}: {self.message}"
        return (
            f"{self.kind} in task {self.task_name!r} at action "
            f"#{self.action_index} ({self.action_name}): {self.message}"
        )


class ElementError(ExecutionError):
    """Selector resolved to no usable element."""

    kind = "ElementError"


class NavigationError(ExecutionError):
    """Navigation or a page fetch failed."""

    kind = "NavigationError"


class ScriptError(ExecutionError):
    """Page script evaluation failed."""

    kind = "ScriptError"


class IoError(ExecutionError):
    """Writing a downloaded file failed."""

    kind = "IoError"


class LaunchError(ExecutionError):
    """Browser, context or page could not be acquired."""

    kind = "LaunchError"
