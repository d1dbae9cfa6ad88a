from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

from ..core.executor.runner import TaskResult


class TaskError(BaseModel):
    kind: str = Field(..., description="ElementError, NavigationError, ScriptError, IoError or LaunchError")
    message: str
    task: str | None = None
    action_index: int | None = Field(None, description="Zero-based position of the failing action")
    action: str | None = Field(None, description="Variant name of the failing action")


class TaskRunResponse(BaseModel):
    name: str
    status: Literal["completed", "failed"]
    values: list[str] = Field(default_factory=list, description="Extracted values in action order")
    error: TaskError | None = None

    @classmethod
    def from_result(cls, result: TaskResult) -> TaskRunResponse:
        error: dict[str, Any] | None = result.error.to_dict() if result.error else None
        return cls(
            name=result.task_name,
            status="completed" if result.ok else "failed",
            values=result.values,
            error=TaskError(**error) if error else None,
        )
