import asyncio
import logging
import datetime as dt
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from api.backend import PlannerBackend
from api.dependencies import get_backend
from timeline_planner.errors import DuplicateTaskError, TaskNotFoundError
from timeline_planner.models import Recurrence

router = APIRouter()
logger = logging.getLogger(__name__)


class TaskIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    start: str  # HH:MM
    end: str  # HH:MM
    category: Optional[str] = None
    priority: Optional[int] = None
    date: Optional[dt.date] = None  # defaults to today
    recurring: Optional[Recurrence] = None
    reminder_minutes: Optional[int] = Field(None, ge=0, alias="reminderMinutes")


class TaskUpdateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    start: Optional[str] = None
    end: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[int] = None
    date: Optional[dt.date] = None
    recurring: Optional[Recurrence] = None
    reminder_minutes: Optional[int] = Field(None, ge=0, alias="reminderMinutes")


def _dump(task) -> dict:
    return task.model_dump(mode="json", by_alias=True)


def _not_found(e: TaskNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


@router.get("/tasks")
async def list_tasks(backend: PlannerBackend = Depends(get_backend)) -> dict:
    tasks = backend.list_tasks()
    return {"tasks": [_dump(t) for t in tasks], "total": len(tasks)}


@router.get("/timeline/{day}")
async def get_timeline(day: date, backend: PlannerBackend = Depends(get_backend)) -> dict:
    """Tasks occurring on a date (YYYY-MM-DD), ordered by start time."""
    tasks = backend.timeline(day)
    return {"date": day.isoformat(), "tasks": [_dump(t) for t in tasks]}


@router.post("/tasks", status_code=201)
async def create_task(payload: TaskIn, backend: PlannerBackend = Depends(get_backend)) -> dict:
    fields = payload.model_dump(exclude_none=True)
    try:
        task = await asyncio.to_thread(backend.create, fields)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except DuplicateTaskError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _dump(task)


@router.put("/tasks/{task_id}")
async def update_task(
    task_id: int,
    payload: TaskUpdateIn,
    backend: PlannerBackend = Depends(get_backend),
) -> dict:
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    try:
        task = await asyncio.to_thread(backend.update, task_id, changes)
    except TaskNotFoundError as e:
        raise _not_found(e)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _dump(task)


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: int, backend: PlannerBackend = Depends(get_backend)) -> dict:
    """Delete the whole series and cancel every reminder it could own."""
    try:
        await asyncio.to_thread(backend.delete_series, task_id)
    except TaskNotFoundError as e:
        raise _not_found(e)
    return {"status": "deleted", "id": task_id}


@router.delete("/tasks/{task_id}/occurrences/{day}")
async def delete_occurrence(
    task_id: int,
    day: date,
    backend: PlannerBackend = Depends(get_backend),
) -> dict:
    try:
        task = await asyncio.to_thread(backend.delete_occurrence, task_id, day)
    except TaskNotFoundError as e:
        raise _not_found(e)
    if task is None:
        return {"status": "deleted", "id": task_id}
    return {"status": "exception_added", "task": _dump(task)}
