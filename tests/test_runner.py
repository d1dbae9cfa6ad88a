"""Tests for task execution and session lifetime."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from fakes import FakeElement, FakeSession

from scrapeflow.adapters.session import SessionError
from scrapeflow.core.errors import ElementError, LaunchError, NavigationError
from scrapeflow.core.executor.actions import ActionExecutor
from scrapeflow.core.executor.runner import managed_session, run_task, run_tasks
from scrapeflow.core.ir.model import (
    Click,
    DownloadFile,
    Extract,
    GoTo,
    ScrapingTask,
    Wait,
)


def _factory(session):
    return lambda: session


class TestRunTask:
    def test_extracts_heading(self, heading_session):
        task = ScrapingTask(
            name="T1",
            actions=(GoTo(url="https://example.test"), Extract(selector="h1", attribute=None)),
        )

        result = run_task(task, session_factory=_factory(heading_session))

        assert result.ok
        assert result.error is None
        assert result.values == ["Hello"]
        assert heading_session.navigations == ["https://example.test"]
        assert heading_session.close_count == 1

    def test_collects_every_extract(self):
        session = FakeSession(
            elements={
                "h1": [FakeElement(text="Title")],
                ".price": [FakeElement(text="9.99")],
            }
        )
        task = ScrapingTask(
            name="many",
            actions=(
                Extract(selector="h1"),
                Extract(selector=".missing"),
                Extract(selector=".price"),
                Wait(milliseconds=0),
            ),
        )

        result = run_task(task, session_factory=_factory(session))

        assert result.values == ["Title", "9.99"]
        assert session.waits == [0]

    def test_download(self, tmp_path: Path):
        url = "https://example.test/f.bin"
        target = tmp_path / "f.bin"
        session = FakeSession(bodies={url: bytes([1, 2, 3])})
        task = ScrapingTask(name="dl", actions=(DownloadFile(url=url, dist_path=str(target)),))

        result = run_task(task, session_factory=_factory(session))

        assert result.ok
        assert result.values == []
        assert target.read_bytes() == bytes([1, 2, 3])

    def test_empty_task(self, session):
        result = run_task(ScrapingTask(name="empty"), session_factory=_factory(session))

        assert result.ok
        assert session.close_count == 1

    @pytest.mark.parametrize("failing_index", [0, 1, 2])
    def test_stops_at_first_failure_and_closes_once(self, failing_index):
        session = FakeSession(elements={"#ok": [FakeElement()]})
        actions = [Click(selector="#ok")] * 4
        actions[failing_index] = Click(selector="#missing")
        task = ScrapingTask(name="fails", actions=tuple(actions))
        executor = ActionExecutor()
        executor.execute = MagicMock(wraps=executor.execute)

        result = run_task(task, session_factory=_factory(session), executor=executor)

        assert not result.ok
        assert isinstance(result.error, ElementError)
        assert result.error.task_name == "fails"
        assert result.error.action_index == failing_index
        assert result.error.action_name == "Click"
        assert executor.execute.call_count == failing_index + 1
        assert session.close_count == 1

    def test_values_before_failure_kept(self, heading_session):
        heading_session.failing_urls = {"https://down.test"}
        task = ScrapingTask(
            name="partial",
            actions=(
                Extract(selector="h1"),
                GoTo(url="https://down.test"),
                Extract(selector="h1"),
            ),
        )

        result = run_task(task, session_factory=_factory(heading_session))

        assert result.values == ["Hello"]
        assert isinstance(result.error, NavigationError)
        assert result.error.action_index == 1
        assert "task 'partial' at action #1 (GoTo)" in str(result.error)

    def test_launch_failure(self):
        def factory():
            raise SessionError("browser launch failed: executable doesn't exist")

        result = run_task(ScrapingTask(name="nobrowser", actions=(GoTo(url="x"),)), factory)

        assert isinstance(result.error, LaunchError)
        assert result.error.task_name == "nobrowser"
        assert "executable" in result.error.message

    def test_close_failure_does_not_mask_result(self, heading_session):
        heading_session.close = MagicMock(side_effect=SessionError("browser already gone"))
        task = ScrapingTask(name="T", actions=(Extract(selector="h1"),))

        result = run_task(task, session_factory=_factory(heading_session))

        assert result.ok
        assert result.values == ["Hello"]
        heading_session.close.assert_called_once()

    def test_uses_configured_settle_delay(self, heading_session, monkeypatch):
        from scrapeflow.core.executor import runner

        monkeypatch.setattr(runner.settings, "login_settle_ms", 10)
        captured = {}

        class RecordingExecutor(ActionExecutor):
            def __init__(self, login_settle_ms):
                captured["settle"] = login_settle_ms
                super().__init__(login_settle_ms)

        monkeypatch.setattr(runner, "ActionExecutor", RecordingExecutor)

        run_task(ScrapingTask(name="T"), session_factory=_factory(heading_session))

        assert captured["settle"] == 10


class TestRunTasks:
    def test_each_task_gets_own_session(self):
        sessions = []

        def factory():
            s = FakeSession(elements={"h1": [FakeElement(text=f"page {len(sessions)}")]})
            sessions.append(s)
            return s

        tasks = [
            ScrapingTask(name="a", actions=(Extract(selector="h1"),)),
            ScrapingTask(name="b", actions=(Click(selector="#missing"),)),
            ScrapingTask(name="c", actions=(Extract(selector="h1"),)),
        ]

        results = run_tasks(tasks, session_factory=factory)

        assert [r.task_name for r in results] == ["a", "b", "c"]
        assert [r.ok for r in results] == [True, False, True]
        assert results[0].values == ["page 0"]
        assert results[2].values == ["page 2"]
        assert [s.close_count for s in sessions] == [1, 1, 1]


class TestManagedSession:
    def test_closes_on_exception(self, session):
        with pytest.raises(RuntimeError):
            with managed_session(_factory(session)):
                raise RuntimeError("boom")

        assert session.close_count == 1
