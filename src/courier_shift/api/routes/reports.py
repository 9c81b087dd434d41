"""Shift history endpoints."""

from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Path, Query, Request

from ...persistence.filesystem import USER_ID_PATTERN
from ...schemas.reports import AttendanceHistoryModel
from ...services.reports import list_attendance_history

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/attendance/{user_id}", response_model=list[AttendanceHistoryModel])
def get_attendance_history(
  request: Request,
  user_id: str = Path(..., pattern=f"^{USER_ID_PATTERN.pattern}$"),
  period: Literal["EARLY", "LATE"] | None = Query(default=None, description="Days 1-15 (EARLY) or 16-end (LATE)"),
  month: str | None = Query(default=None, pattern=r"^\d{4}-\d{2}$", description="Calendar month as YYYY-MM"),
  limit: int | None = Query(default=None, gt=0, description="Maximum number of shifts to return"),
) -> list[AttendanceHistoryModel]:
  archive = request.app.state.archive
  if archive is None:
    return []
  entries = list_attendance_history(
    user_id,
    period=period,
    month=month,
    limit=limit,
    archive=archive,
  )
  return [AttendanceHistoryModel.model_validate(item) for item in entries]
