import logging
import uuid

from fastapi import APIRouter, HTTPException, Request
from starlette.concurrency import run_in_threadpool

from packages.config import MAX_UPLOAD_BYTES
from services.processing.models import to_dict
from services.processing.wrapped import CATEGORIES, run_category
from ..schemas import CategoryResultResponse


router = APIRouter()

logger = logging.getLogger("fitness.api")


@router.post("/wrapped/{category}", response_model=CategoryResultResponse)
async def wrapped(category: str, request: Request):
    if category not in CATEGORIES:
        raise HTTPException(status_code=404, detail=f"Unknown category: {category}")
    payload = await request.body()
    if len(payload) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"Upload exceeds {MAX_UPLOAD_BYTES} bytes")

    upload_id = request.headers.get("x-upload-id") or uuid.uuid4().hex
    result = await run_in_threadpool(run_category, category, payload, upload_id=upload_id)
    logger.info("upload %s category=%s bytes=%d status=%s", upload_id, category, len(payload), result.status)
    return {
        "category": result.category,
        "status": result.status,
        "snapshot": to_dict(result.snapshot),
        "error": result.error,
        "upload_id": upload_id,
    }
