"""Comparison of scanned packages against the declared manifest."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Classification(str, Enum):
    EXACT = "EXACT"
    UNDER = "UNDER"
    OVER = "OVER"


@dataclass(frozen=True, slots=True)
class ReconciliationResult:
    loaded_count: int
    declared_total: int
    classification: Classification
    message: str

    @property
    def difference(self) -> int:
        """Positive for a surplus, negative for a shortfall."""
        return self.loaded_count - self.declared_total

    @property
    def is_warning(self) -> bool:
        return self.classification is not Classification.EXACT


def reconcile(loaded_count: int, declared_total: int) -> ReconciliationResult:
    if loaded_count < declared_total:
        shortfall = declared_total - loaded_count
        message = (
            f"WARNING: you declared {declared_total} packages but only scanned {loaded_count} "
            f"({shortfall} missing). Start delivering anyway?"
        )
        classification = Classification.UNDER
    elif loaded_count > declared_total:
        surplus = loaded_count - declared_total
        message = (
            f"INFO: scanned packages ({loaded_count}) exceed the declared total ({declared_total}) "
            f"by {surplus}. Continue?"
        )
        classification = Classification.OVER
    else:
        message = "Loading finished? Make sure every package is on board."
        classification = Classification.EXACT
    return ReconciliationResult(
        loaded_count=loaded_count,
        declared_total=declared_total,
        classification=classification,
        message=message,
    )
