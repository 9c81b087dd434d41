"""Shift session snapshot and package record store helpers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable, Iterable, Optional

from ...models.domain import (
    AttendanceRecord,
    Package,
    PackageStatus,
    Role,
    ShiftSummary,
    User,
    WorkflowPhase,
)
from .errors import PackageNotFoundError, RoleNotAllowedError


@dataclass(frozen=True, slots=True)
class ShiftSession:
    """Everything owned by the active courier shift.

    Packages are kept most-recent-first. Sessions are never mutated; every
    workflow operation returns a new snapshot.
    """

    user: User
    phase: WorkflowPhase = WorkflowPhase.ABSENT
    summary: ShiftSummary = field(default_factory=ShiftSummary)
    packages: tuple[Package, ...] = ()
    attendance: Optional[AttendanceRecord] = None

    def find(self, tracking_number: str) -> Optional[Package]:
        """Exact, case-sensitive tracking number match."""
        for package in self.packages:
            if package.tracking_number == tracking_number:
                return package
        return None

    def find_ignore_case(self, tracking_number: str) -> Optional[Package]:
        needle = tracking_number.strip().lower()
        for package in self.packages:
            if package.tracking_number.lower() == needle:
                return package
        return None

    def with_packages(self, packages: Iterable[Package]) -> "ShiftSession":
        return replace(self, packages=tuple(packages))


@dataclass(frozen=True, slots=True)
class ActionResult:
    """Outcome of a workflow operation.

    ``session`` is always the snapshot to keep using: the new one when the
    action was accepted, the untouched input otherwise.
    """

    session: ShiftSession
    accepted: bool
    notice: Optional[str] = None
    code: Optional[str] = None
    package: Optional[Package] = None
    detail: dict = field(default_factory=dict)


def open_session(user: User) -> ShiftSession:
    """Start a fresh, checked-out session for ``user``.

    Only couriers may enter the workflow.
    """
    if user.role is not Role.COURIER:
        raise RoleNotAllowedError(f"Role {user.role.value} cannot start a courier shift.")
    return ShiftSession(user=user)


def reset_session(session: ShiftSession) -> ShiftSession:
    return ShiftSession(user=session.user)


def prepend_package(session: ShiftSession, package: Package) -> ShiftSession:
    return session.with_packages((package, *session.packages))


def update_package(
    session: ShiftSession,
    package_id: str,
    change: Callable[[Package], Package],
) -> tuple[ShiftSession, Package]:
    """Replace one package record with ``change(record)``."""
    updated: Optional[Package] = None
    packages: list[Package] = []
    for package in session.packages:
        if package.id == package_id:
            updated = change(package)
            packages.append(updated)
        else:
            packages.append(package)
    if updated is None:
        raise PackageNotFoundError(f"Package {package_id} is not part of this shift.")
    return session.with_packages(packages), updated


def packages_with_status(session: ShiftSession, *statuses: PackageStatus) -> list[Package]:
    return [package for package in session.packages if package.status in statuses]


def non_terminal_packages(session: ShiftSession) -> list[Package]:
    return [package for package in session.packages if not package.status.is_terminal]
