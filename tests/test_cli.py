"""Tests for the command line entry point."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from scrapeflow.__main__ import EXIT_BAD_INPUT, EXIT_OK, EXIT_TASK_FAILED, main
from scrapeflow.config.settings import settings
from scrapeflow.core.errors import NavigationError
from scrapeflow.core.executor.runner import TaskResult

DATA = Path(__file__).parent / "data" / "tasks.json"


@pytest.fixture(autouse=True)
def _restore_headless():
    original = settings.headless
    yield
    settings.headless = original


def test_runs_all_tasks(capsys):
    with patch("scrapeflow.__main__.run_tasks") as mock_run:
        mock_run.side_effect = lambda tasks: [TaskResult(task_name=t.name) for t in tasks]

        assert main([str(DATA)]) == EXIT_OK

        (tasks,) = mock_run.call_args.args
        assert len(tasks) == 5
    assert "[ok] Task 1" in capsys.readouterr().out


def test_selected_task_json_output(capsys):
    with patch("scrapeflow.__main__.run_tasks") as mock_run:
        mock_run.return_value = [TaskResult(task_name="Task 1", values=["Example Domain"])]

        assert main([str(DATA), "--task", "Task 1", "--json"]) == EXIT_OK

        (tasks,) = mock_run.call_args.args
        assert [t.name for t in tasks] == ["Task 1"]
    out = json.loads(capsys.readouterr().out)
    assert out == [{"name": "Task 1", "status": "completed", "values": ["Example Domain"], "error": None}]


def test_failed_task_exit_code(capsys):
    error = NavigationError("navigation to https://down.test failed").bind("Task 1", 0, "GoTo")
    with patch("scrapeflow.__main__.run_tasks") as mock_run:
        mock_run.return_value = [TaskResult(task_name="Task 1", error=error)]

        assert main([str(DATA), "--task", "Task 1"]) == EXIT_TASK_FAILED
    out = capsys.readouterr().out
    assert "[FAILED] Task 1" in out
    assert "NavigationError" in out


def test_headed_flag():
    with patch("scrapeflow.__main__.run_tasks", return_value=[]):
        main([str(DATA), "--task", "Task 5", "--headed"])
    assert settings.headless is False


def test_parse_error(tmp_path: Path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text('[{"name": "x", "actions": [{"Fly": {}}]}]', encoding="utf-8")

    with patch("scrapeflow.__main__.run_tasks") as mock_run:
        assert main([str(bad)]) == EXIT_BAD_INPUT
        mock_run.assert_not_called()
    assert "unknown action 'Fly'" in capsys.readouterr().err


def test_unknown_task_name(capsys):
    with patch("scrapeflow.__main__.run_tasks") as mock_run:
        assert main([str(DATA), "--task", "Task 9"]) == EXIT_BAD_INPUT
        mock_run.assert_not_called()
    assert "Task 9" in capsys.readouterr().err
