from typing import Any

from fastapi import APIRouter, Body, HTTPException

from ..core.errors import ParseError
from ..core.executor.runner import run_tasks
from ..core.ir.loader import parse_tasks
from .dto import TaskRunResponse


router = APIRouter()


@router.post("/tasks/run", response_model=list[TaskRunResponse])
def run(document: Any = Body(..., description="Task document: a JSON array of tasks")) -> list[TaskRunResponse]:
    try:
        tasks = parse_tasks(document)
    except ParseError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [TaskRunResponse.from_result(r) for r in run_tasks(tasks)]
