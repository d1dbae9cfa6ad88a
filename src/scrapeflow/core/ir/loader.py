"""Load task documents into the task IR.

A task document is a JSON array of tasks. Each action is externally tagged:

    [
        {
            "name": "Task 1",
            "actions": [
                {"GoTo": {"url": "https://example.com"}},
                {"Extract": {"selector": "h1", "attribute": null}}
            ]
        }
    ]

Loading is all-or-nothing: any malformed task or action fails the whole
document with ParseError.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ParseError
from .model import ACTION_TYPES, Action, ScrapingTask

logger = logging.getLogger(__name__)


def _format_validation_error(err: ValidationError) -> str:
    parts = []
    for item in err.errors():
        loc = ".".join(str(p) for p in item.get("loc", ())) or "<body>"
        parts.append(f"{loc}: {item.get('msg')}")
    return "; ".join(parts)


def parse_action(raw: Any, where: str = "action") -> Action:
    """Build one action from its externally tagged wire form."""
    if not isinstance(raw, dict) or len(raw) != 1:
        raise ParseError(f"{where}: expected an object with exactly one action key")

    ((tag, body),) = raw.items()
    cls = ACTION_TYPES.get(tag)
    if cls is None:
        raise ParseError(f"{where}: unknown action {tag!r}")
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ParseError(f"{where}: {tag} fields must be an object")

    # Extra keys are ignored; only declared fields reach the constructor.
    names = {f.name for f in dataclasses.fields(cls)}
    kwargs = {k: v for k, v in body.items() if k in names}
    try:
        return cls(**kwargs)
    except ValidationError as e:
        raise ParseError(f"{where} ({tag}): {_format_validation_error(e)}") from e


def parse_task(raw: Any, index: int = 0) -> ScrapingTask:
    where = f"task #{index}"
    if not isinstance(raw, dict):
        raise ParseError(f"{where}: expected an object")
    name = raw.get("name")
    if not isinstance(name, str):
        raise ParseError(f"{where}: 'name' must be a string")
    actions = raw.get("actions")
    if not isinstance(actions, list):
        raise ParseError(f"{where} ({name!r}): 'actions' must be an array")

    parsed = [
        parse_action(item, where=f"{where} ({name!r}) action #{i}")
        for i, item in enumerate(actions)
    ]
    return ScrapingTask(name=name, actions=tuple(parsed))


def parse_tasks(document: Any) -> list[ScrapingTask]:
    """Build tasks from an already decoded JSON document."""
    if not isinstance(document, list):
        raise ParseError("task document must be a JSON array of tasks")
    return [parse_task(raw, i) for i, raw in enumerate(document)]


def loads_tasks(text: str | bytes) -> list[ScrapingTask]:
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON: {e}") from e
    return parse_tasks(document)


def load_tasks(path: str | Path) -> list[ScrapingTask]:
    """Read and parse a task file."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ParseError(f"cannot read task file {p}: {e}") from e
    tasks = loads_tasks(text)
    logger.info("Loaded %d task(s) from %s", len(tasks), p)
    return tasks


def dump_action(action: Action) -> dict[str, Any]:
    return {type(action).__name__: dataclasses.asdict(action)}


def dump_tasks(tasks: list[ScrapingTask]) -> list[dict[str, Any]]:
    """Inverse of parse_tasks."""
    return [
        {"name": task.name, "actions": [dump_action(a) for a in task.actions]}
        for task in tasks
    ]


def dumps_tasks(tasks: list[ScrapingTask], indent: int | None = 2) -> str:
    return json.dumps(dump_tasks(tasks), indent=indent, ensure_ascii=False)
