"""Shift history report exports."""

from .history import list_attendance_history

__all__ = ["list_attendance_history"]
