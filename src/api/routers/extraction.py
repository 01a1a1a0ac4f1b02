import asyncio
import base64
import binascii
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.backend import PlannerBackend
from api.dependencies import get_backend
from llm.providers.base import ImageInput
from timeline_planner.errors import ExtractionError

router = APIRouter()
logger = logging.getLogger(__name__)


class QuickAddIn(BaseModel):
    text: str = Field(..., min_length=1)


class ImageIn(BaseModel):
    image_base64: str = Field(..., min_length=1)
    mime_type: str = "image/jpeg"


@router.post("/tasks/quick-add")
async def quick_add(payload: QuickAddIn, backend: PlannerBackend = Depends(get_backend)) -> dict:
    """Create one task from a short natural-language note."""
    if not payload.text.strip():
        raise HTTPException(status_code=400, detail="text must not be blank")
    logger.info(f"Quick add: {payload.text[:50]}...")
    try:
        task = await asyncio.to_thread(backend.quick_add, payload.text)
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=f"Extraction failed: {e}")
    if task is None:
        raise HTTPException(status_code=422, detail="Could not understand the task")
    return {"status": "created", "task": task.model_dump(mode="json", by_alias=True)}


@router.post("/tasks/import-image")
async def import_image(payload: ImageIn, backend: PlannerBackend = Depends(get_backend)) -> dict:
    """Create tasks for every new entry found in a photo of a schedule."""
    try:
        base64.b64decode(payload.image_base64, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(status_code=400, detail="image_base64 is not valid base64")

    image = ImageInput(data_b64=payload.image_base64, mime_type=payload.mime_type)
    try:
        tasks = await asyncio.to_thread(backend.import_from_image, image)
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=f"Extraction failed: {e}")
    return {
        "status": "created" if tasks else "no_new_tasks",
        "tasks": [t.model_dump(mode="json", by_alias=True) for t in tasks],
    }
