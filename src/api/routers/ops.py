import logging

from fastapi import APIRouter, Depends, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from api.backend import PlannerBackend
from api.dependencies import get_backend
from api.metrics import TASKS_GAUGE
from notifications.gateway_facility import HttpNotificationFacility

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(backend: PlannerBackend = Depends(get_backend)) -> dict:
    """Health check endpoint for container orchestration."""
    facility = backend.scheduler.facility
    return {
        "status": "healthy",
        "tasks": len(backend.tasks),
        "notification_facility": "gateway" if isinstance(facility, HttpNotificationFacility) else "in-memory",
    }


@router.get("/metrics")
async def metrics(backend: PlannerBackend = Depends(get_backend)) -> Response:
    """
    Prometheus scrape endpoint.
    """
    TASKS_GAUGE.set(len(backend.tasks))
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
