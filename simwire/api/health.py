from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(request: Request):
    """Liveness probe: confirms the process is alive and reports the protocol version."""
    return {
        "status": "ok",
        "protocol_version": request.app.state.settings.protocol_version,
    }
