"""Attendance and shift history read back from the shift archive."""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from ...persistence.filesystem import ShiftArchive

logger = logging.getLogger(__name__)

Period = Literal["EARLY", "LATE"]

_EARLY_LAST_DAY = 15


def list_attendance_history(
    user_id: str,
    *,
    period: Optional[Period] = None,
    month: Optional[str] = None,
    limit: Optional[int] = None,
    archive: Optional[ShiftArchive] = None,
) -> List[dict]:
    """Archived shifts for ``user_id``, newest first.

    ``period`` splits a month into days 1-15 (EARLY) and 16-end (LATE);
    ``month`` is ``YYYY-MM``.
    """
    archive = archive or ShiftArchive()
    entries: List[dict] = []
    for path in archive.iter_shift_files(user_id):
        record = archive.load_shift(path)
        if not record:
            logger.warning("Skipping unreadable shift archive %s", path.name)
            continue
        entry = _build_history_entry(record, user_id)
        if entry is None:
            continue
        if month and entry["date"].strftime("%Y-%m") != month:
            continue
        if period and _period_of(entry["date"]) != period:
            continue
        entries.append(entry)

    entries.sort(key=lambda item: item["date"], reverse=True)
    if limit:
        return entries[:limit]
    return entries


def _build_history_entry(record: Dict[str, Any], user_id: str) -> Optional[dict]:
    attendance = record.get("attendance")
    if not isinstance(attendance, dict) or attendance.get("user_id") != user_id:
        return None
    day = _parse_date(attendance.get("date"))
    if day is None:
        return None
    summary = record.get("summary") if isinstance(record.get("summary"), dict) else {}
    stats = record.get("stats") if isinstance(record.get("stats"), dict) else {}
    return {
        "date": day,
        "status": attendance.get("status") or "PRESENT",
        "check_in": _parse_datetime(attendance.get("check_in")),
        "check_out": _parse_datetime(attendance.get("check_out")),
        "total_packages": summary.get("total_packages") or 0,
        "delivered": stats.get("delivered") or 0,
        "returned": stats.get("returned") or 0,
        "cod_collected": stats.get("cod_collected") or 0,
        "success_rate": stats.get("success_rate") or 0.0,
    }


def _period_of(day: date) -> Period:
    return "EARLY" if day.day <= _EARLY_LAST_DAY else "LATE"


def _parse_date(value: Any) -> Optional[date]:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _parse_datetime(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
