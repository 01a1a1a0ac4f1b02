import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.backend import PlannerBackend
from api.dependencies import get_backend
from timeline_planner.errors import NotificationFacilityUnavailable

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/reminders/pending")
async def pending_reminders(backend: PlannerBackend = Depends(get_backend)) -> dict:
    try:
        pending = await asyncio.to_thread(backend.pending_reminders)
    except NotificationFacilityUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {
        "reminders": [r.model_dump(mode="json") for r in pending],
        "total": len(pending),
    }


@router.post("/reminders/reschedule")
async def reschedule_all(backend: PlannerBackend = Depends(get_backend)) -> dict:
    reports = await asyncio.to_thread(backend.reschedule_all)
    return {
        "tasks": len(reports),
        "scheduled": sum(len(r.scheduled) for r in reports),
        "failed": [{"task_id": r.task_id, "errors": [str(e) for e in r.errors]} for r in reports if not r.ok],
    }


@router.post("/reminders/test")
async def test_notification(backend: PlannerBackend = Depends(get_backend)) -> dict:
    try:
        reminder = await asyncio.to_thread(backend.send_test_notification)
    except NotificationFacilityUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"status": "scheduled", "reminder": reminder.model_dump(mode="json")}
