"""Command line entry point: run the tasks of a task file.

    scrapeflow tasks.json
    scrapeflow tasks.json --task "Task 2" --headed --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from .config.settings import settings
from .core.errors import ParseError
from .core.executor.runner import TaskResult, run_tasks
from .core.ir.loader import load_tasks
from .telemetry import init_telemetry, shutdown_telemetry

EXIT_OK = 0
EXIT_TASK_FAILED = 1
EXIT_BAD_INPUT = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scrapeflow", description="Run declarative browser automation tasks."
    )
    parser.add_argument("tasks_file", help="JSON task document")
    parser.add_argument(
        "--task",
        action="append",
        dest="task_names",
        metavar="NAME",
        help="Only run the named task (repeatable). Default: all tasks.",
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    return parser


def _print_results(results: list[TaskResult], as_json: bool) -> None:
    if as_json:
        payload = [
            {
                "name": r.task_name,
                "status": "completed" if r.ok else "failed",
                "values": r.values,
                "error": r.error.to_dict() if r.error else None,
            }
            for r in results
        ]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return

    for r in results:
        status = "ok" if r.ok else "FAILED"
        print(f"[{status}] {r.task_name}")
        for value in r.values:
            print(f"  {value}")
        if r.error:
            print(f"  error: {r.error}")


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.headed:
        settings.headless = False

    try:
        tasks = load_tasks(args.tasks_file)
    except ParseError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT

    if args.task_names:
        known = {t.name for t in tasks}
        missing = [n for n in args.task_names if n not in known]
        if missing:
            print(f"error: unknown task(s): {', '.join(missing)}", file=sys.stderr)
            return EXIT_BAD_INPUT
        tasks = [t for t in tasks if t.name in args.task_names]

    init_telemetry()
    try:
        results = run_tasks(tasks)
    finally:
        shutdown_telemetry()

    _print_results(results, args.json)
    return EXIT_OK if all(r.ok for r in results) else EXIT_TASK_FAILED


if __name__ == "__main__":
    sys.exit(main())
