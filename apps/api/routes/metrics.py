from fastapi import APIRouter, Response

from packages.metrics import render_text, snapshot

router = APIRouter()


@router.get("/metrics")
def metrics():
    counters, durations = snapshot()
    return Response(content=render_text(counters, durations), media_type="text/plain")
