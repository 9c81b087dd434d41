"""Daily performance figures for the active shift."""

from __future__ import annotations

from dataclasses import dataclass

from ...models.domain import PackageStatus
from .session import ShiftSession


@dataclass(slots=True)
class ShiftStats:
    total: int
    loaded: int
    delivered: int
    failed: int
    returned: int
    remaining: int
    cod_collected: int
    cod_outstanding: int
    success_rate: float


def compute_shift_stats(session: ShiftSession) -> ShiftStats:
    counts = {status: 0 for status in PackageStatus}
    cod_collected = 0
    cod_outstanding = 0
    for package in session.packages:
        counts[package.status] += 1
        if not package.is_cod:
            continue
        if package.status is PackageStatus.DELIVERED:
            cod_collected += package.cod_amount
        elif package.status is not PackageStatus.RETURNED:
            cod_outstanding += package.cod_amount

    total = len(session.packages)
    delivered = counts[PackageStatus.DELIVERED]
    success_rate = round(delivered / total * 100, 1) if total else 0.0
    return ShiftStats(
        total=total,
        loaded=counts[PackageStatus.LOADED],
        delivered=delivered,
        failed=counts[PackageStatus.FAILED],
        returned=counts[PackageStatus.RETURNED],
        remaining=total - delivered - counts[PackageStatus.RETURNED],
        cod_collected=cod_collected,
        cod_outstanding=cod_outstanding,
        success_rate=success_rate,
    )
