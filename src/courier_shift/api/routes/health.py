"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/session", status_code=status.HTTP_200_OK)
def health_session(request: Request) -> dict:
    """Report whether a courier session is open and which phase it is in."""
    session = getattr(request.app.state, "shift_session", None)
    if session is None:
        return {"session": False}
    return {"session": True, "user_id": session.user.id, "phase": session.phase.value}
