"""Task runner: owns the browser session for the lifetime of one task."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from opentelemetry.trace import Status, StatusCode

from ...adapters.session import BrowserSession, SessionError
from ...config.settings import settings
from ...telemetry import get_tracer
from ..errors import ExecutionError, LaunchError
from ..ir.model import ScrapingTask
from .actions import ActionExecutor

logger = logging.getLogger(__name__)

SessionFactory = Callable[[], BrowserSession]


@dataclass
class TaskResult:
    """Values extracted by a task, or the error that stopped it.

    `values` holds every non-empty Extract result in action order, including
    the ones produced before a failure.
    """

    task_name: str
    values: list[str] = field(default_factory=list)
    error: ExecutionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _default_session_factory() -> BrowserSession:
    from ...adapters.playwright import launch_session

    return launch_session(settings)


@contextmanager
def managed_session(factory: SessionFactory) -> Iterator[BrowserSession]:
    """Acquire a session and close it exactly once, whatever happens inside."""
    session = factory()
    try:
        yield session
    finally:
        try:
            session.close()
        except SessionError as e:
            logger.warning("Closing browser session failed: %s", e)


def run_task(
    task: ScrapingTask,
    session_factory: SessionFactory | None = None,
    executor: ActionExecutor | None = None,
) -> TaskResult:
    """Run every action of task in order against a fresh session.

    Stops at the first failing action. The session is released on every
    exit path.
    """
    factory = session_factory or _default_session_factory
    executor = executor or ActionExecutor(login_settle_ms=settings.login_settle_ms)
    result = TaskResult(task_name=task.name)
    tracer = get_tracer()

    with tracer.start_as_current_span("task") as task_span:
        task_span.set_attribute("scrapeflow.task", task.name)
        task_span.set_attribute("scrapeflow.actions", len(task.actions))
        logger.info("Task %r: %d action(s)", task.name, len(task.actions))

        try:
            with managed_session(factory) as session:
                for index, action in enumerate(task.actions):
                    action_name = type(action).__name__
                    with tracer.start_as_current_span(action_name) as span:
                        span.set_attribute("scrapeflow.action_index", index)
                        outcome = executor.execute(action, session)
                        if not outcome.ok:
                            span.set_status(Status(StatusCode.ERROR, outcome.error.message))
                    if not outcome.ok:
                        result.error = outcome.error.bind(task.name, index, action_name)
                        break
                    if outcome.value is not None:
                        result.values.append(outcome.value)
        except SessionError as e:
            # Only acquisition can raise here; actions report through ActionResult.
            result.error = LaunchError(str(e))
            result.error.task_name = task.name

        if result.error is not None:
            task_span.set_status(Status(StatusCode.ERROR, str(result.error)))
            logger.error("Task %r failed: %s", task.name, result.error)
        else:
            logger.info("Task %r finished with %d value(s)", task.name, len(result.values))
    return result


def run_tasks(
    tasks: Iterable[ScrapingTask],
    session_factory: SessionFactory | None = None,
    executor: ActionExecutor | None = None,
) -> list[TaskResult]:
    """Run tasks one after another; a failed task does not stop the rest."""
    return [run_task(t, session_factory=session_factory, executor=executor) for t in tasks]
