"""Courier shift workflow core."""

from .errors import ShiftError
from .prompts import ACCEPT, CANCEL, PresetPrompter, Prompter
from .reconciliation import Classification, ReconciliationResult, reconcile
from .session import ActionResult, ShiftSession, open_session
from .stats import ShiftStats, compute_shift_stats
from .workflow import (
    ShiftWorkflow,
    coerce_count,
    loading_progress,
    pending_deliveries,
    pending_returns,
    search_packages,
)

__all__ = [
    "ACCEPT",
    "CANCEL",
    "ActionResult",
    "Classification",
    "PresetPrompter",
    "Prompter",
    "ReconciliationResult",
    "ShiftError",
    "ShiftSession",
    "ShiftStats",
    "ShiftWorkflow",
    "coerce_count",
    "compute_shift_stats",
    "loading_progress",
    "open_session",
    "pending_deliveries",
    "pending_returns",
    "reconcile",
    "search_packages",
]
