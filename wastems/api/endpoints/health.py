"""Health check endpoint. No dependencies; used for liveness probes."""

import time

from fastapi import APIRouter, Request

from wastems.shared.utils import isoformat_z

router = APIRouter()


@router.get("")
def health_check(request: Request) -> dict:
    """Return OK with the current time and process uptime in seconds."""
    started_at = getattr(request.app.state, "started_at", None)
    uptime = time.monotonic() - started_at if started_at is not None else 0.0
    return {"status": "OK", "timestamp": isoformat_z(), "uptime": round(uptime, 3)}
