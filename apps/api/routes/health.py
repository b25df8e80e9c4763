from fastapi import APIRouter

from packages.config import RUN_MODE
from services.processing.wrapped import CATEGORIES
from ..schemas import HealthResponse


router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health():
    return {"status": "ok", "run_mode": RUN_MODE, "categories": list(CATEGORIES)}
