import asyncio
import logging
import time

from fastapi import FastAPI, Request

from api import state
from api.backend import PlannerBackend
from api.metrics import REQUESTS_TOTAL, REQUEST_LATENCY_SECONDS
from api.routers import extraction, ops, reminders, tasks

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Daily Timeline Planner")

app.include_router(tasks.router)
app.include_router(extraction.router)
app.include_router(reminders.router)
app.include_router(ops.router)


@app.middleware("http")
async def count_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)
    REQUESTS_TOTAL.labels(endpoint=endpoint, status=str(response.status_code)).inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - start)
    return response


@app.on_event("startup")
async def startup() -> None:
    if state.backend is None:
        state.backend = await asyncio.to_thread(PlannerBackend)
    # The host facility may have lost reminders while we were down
    reports = await asyncio.to_thread(state.backend.reschedule_all)
    logger.info(f"Startup: reminders refreshed for {len(reports)} task(s)")
