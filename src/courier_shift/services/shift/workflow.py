"""Courier shift workflow: ABSENT -> PLANNING -> LOADING -> DELIVERING -> CLOSING.

Every operation takes the current ``ShiftSession`` and returns an
``ActionResult`` holding the snapshot to continue with. Refusals never raise:
they are reported through the injected prompter and come back as
``accepted=False`` with the original session untouched.
"""

from __future__ import annotations

import functools
import logging
import re
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from ...config import Settings, settings
from ...models.domain import (
    AttendanceRecord,
    AttendanceStatus,
    Package,
    PackageStatus,
    WorkflowPhase,
)
from ...persistence.filesystem import ShiftArchive
from .classification import PackageClassifier, RandomClassifier
from .completion import (
    lookup_for_delivery,
    lookup_for_return,
    mark_delivered,
    mark_failed,
    mark_returned,
    validate_delivery_capture,
    validate_return_capture,
)
from .errors import (
    DuplicateScanError,
    EmptyLoadError,
    InvalidTrackingCodeError,
    ManifestValidationError,
    PackageNotFoundError,
    PendingPackagesError,
    PhaseError,
    ShiftError,
)
from .prompts import ACCEPT, Prompter
from .reconciliation import ReconciliationResult, reconcile
from .session import (
    ActionResult,
    ShiftSession,
    non_terminal_packages,
    packages_with_status,
    prepend_package,
    reset_session,
    update_package,
)
from .stats import compute_shift_stats

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

SHIFT_FINISHED_MESSAGE = "Shift finished! Thank you for your hard work."


def coerce_count(value: Any) -> int:
    """Read a manifest count the lenient way a numeric input field does.

    Leading digits are kept (``"12abc"`` -> 12, ``3.7`` -> 3); anything else,
    including negatives, becomes 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    match = _LEADING_INT.match(str(value))
    if not match:
        return 0
    return max(0, int(match.group(1)))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return uuid.uuid4().hex[:12]


def _refusals_as_results(method: Callable[..., ActionResult]) -> Callable[..., ActionResult]:
    @functools.wraps(method)
    def wrapper(self: "ShiftWorkflow", session: ShiftSession, *args: Any, **kwargs: Any) -> ActionResult:
        try:
            return method(self, session, *args, **kwargs)
        except ShiftError as exc:
            return self._refuse(session, method.__name__, exc)

    return wrapper


class ShiftWorkflow:
    """Gatekeeper for every state change of a courier shift."""

    def __init__(
        self,
        prompter: Prompter,
        classifier: Optional[PackageClassifier] = None,
        *,
        clock: Optional[Callable[[], datetime]] = None,
        id_factory: Optional[Callable[[], str]] = None,
        archive: Optional[ShiftArchive] = None,
        config: Settings = settings,
    ) -> None:
        self.prompter = prompter
        self.config = config
        self.classifier = classifier or RandomClassifier(config=config)
        self.clock = clock or _utcnow
        self.id_factory = id_factory or _new_id
        self.archive = archive

    # -- ABSENT -------------------------------------------------------------

    @_refusals_as_results
    def check_in(self, session: ShiftSession) -> ActionResult:
        self._require_phase(session, WorkflowPhase.ABSENT)
        now = self.clock()
        attendance = AttendanceRecord(
            id=f"att-{self.id_factory()}",
            user_id=session.user.id,
            date=now.date(),
            check_in=now,
            status=self._attendance_status(now),
        )
        updated = replace(session, phase=WorkflowPhase.PLANNING, attendance=attendance)
        logger.info("Courier %s checked in (%s)", session.user.id, attendance.status.value)
        return ActionResult(updated, accepted=True)

    # -- PLANNING -----------------------------------------------------------

    @_refusals_as_results
    def declare_manifest(self, session: ShiftSession, total_cod: Any, total_non_cod: Any) -> ActionResult:
        self._require_phase(session, WorkflowPhase.PLANNING)
        summary = replace(
            session.summary,
            total_cod=coerce_count(total_cod),
            total_non_cod=coerce_count(total_non_cod),
        )
        return ActionResult(replace(session, summary=summary), accepted=True)

    @_refusals_as_results
    def confirm_manifest(self, session: ShiftSession) -> ActionResult:
        self._require_phase(session, WorkflowPhase.PLANNING)
        total = session.summary.declared_total
        if total <= 0:
            raise ManifestValidationError("Total packages cannot be 0.")
        summary = replace(session.summary, total_packages=total)
        updated = replace(session, phase=WorkflowPhase.LOADING, summary=summary)
        logger.info("Manifest confirmed for %s: %d packages", session.user.id, total)
        return ActionResult(updated, accepted=True)

    # -- LOADING ------------------------------------------------------------

    @_refusals_as_results
    def scan_package(self, session: ShiftSession, code: Optional[str]) -> ActionResult:
        self._require_phase(session, WorkflowPhase.LOADING)
        tracking_number = (code or "").strip()
        if not tracking_number:
            raise InvalidTrackingCodeError("Enter or scan a tracking number.")
        if session.find_ignore_case(tracking_number) is not None:
            raise DuplicateScanError(f"Package {tracking_number} was already scanned.")
        try:
            entry = self.classifier.classify(tracking_number)
        except KeyError as exc:
            raise PackageNotFoundError(f"Package {tracking_number} is not in the depot manifest.") from exc

        package = Package(
            id=f"pkg-{self.id_factory()}",
            tracking_number=tracking_number,
            type=entry.type,
            recipient_name=entry.recipient_name,
            address=entry.address,
            phone_number=entry.phone_number,
            coordinates=entry.coordinates,
            status=PackageStatus.LOADED,
            timestamp=self.clock(),
            cod_amount=entry.cod_amount,
        )
        logger.info("Loaded %s (%s)", tracking_number, package.type.value)
        return ActionResult(prepend_package(session, package), accepted=True, package=package)

    @_refusals_as_results
    def request_start_delivery(self, session: ShiftSession) -> ActionResult:
        self._require_phase(session, WorkflowPhase.LOADING)
        if not session.packages:
            raise EmptyLoadError("Scan at least one package before starting delivery.")
        result = loading_progress(session)
        detail = {"reconciliation": result}
        if self.prompter.confirm(result.message) != ACCEPT:
            logger.info("Start of delivery cancelled (%s)", result.classification.value)
            return ActionResult(session, accepted=False, code="cancelled", detail=detail)
        logger.info(
            "Delivery started with %d/%d packages (%s)",
            result.loaded_count,
            result.declared_total,
            result.classification.value,
        )
        return ActionResult(replace(session, phase=WorkflowPhase.DELIVERING), accepted=True, detail=detail)

    # -- DELIVERING ---------------------------------------------------------

    @_refusals_as_results
    def find_for_delivery(self, session: ShiftSession, code: Optional[str]) -> ActionResult:
        self._require_phase(session, WorkflowPhase.DELIVERING, WorkflowPhase.CLOSING)
        package = lookup_for_delivery(session, code or "")
        return ActionResult(session, accepted=True, package=package)

    @_refusals_as_results
    def complete_delivery(
        self,
        session: ShiftSession,
        code: Optional[str],
        proof_image: Optional[str],
        received_by: Optional[str],
    ) -> ActionResult:
        self._require_phase(session, WorkflowPhase.DELIVERING, WorkflowPhase.CLOSING)
        package = lookup_for_delivery(session, code or "")
        proof, receiver = validate_delivery_capture(proof_image, received_by)
        now = self.clock()
        updated, delivered = update_package(
            session,
            package.id,
            lambda record: mark_delivered(
                record,
                proof_image=proof,
                received_by=receiver,
                now=now,
                overwrite_recipient=self.config.overwrite_recipient_on_delivery,
            ),
        )
        logger.info("Delivered %s to %s", delivered.tracking_number, receiver)
        return ActionResult(updated, accepted=True, package=delivered)

    @_refusals_as_results
    def request_finish_delivery(self, session: ShiftSession) -> ActionResult:
        self._require_phase(session, WorkflowPhase.DELIVERING)
        leftovers = packages_with_status(session, PackageStatus.PENDING, PackageStatus.LOADED)
        message = f"Finish delivering and process the {len(leftovers)} remaining package(s)?"
        detail = {"remaining": len(leftovers)}
        if self.prompter.confirm(message) != ACCEPT:
            return ActionResult(session, accepted=False, code="cancelled", detail=detail)

        now = self.clock()
        failed_ids = {package.id for package in leftovers}
        packages = [
            mark_failed(package, now=now) if package.id in failed_ids else package
            for package in session.packages
        ]
        updated = replace(session.with_packages(packages), phase=WorkflowPhase.CLOSING)
        logger.info("Delivery finished for %s; %d package(s) marked FAILED", session.user.id, len(leftovers))
        return ActionResult(updated, accepted=True, detail=detail)

    # -- CLOSING ------------------------------------------------------------

    @_refusals_as_results
    def complete_return(self, session: ShiftSession, code: Optional[str], staff_name: Optional[str]) -> ActionResult:
        self._require_phase(session, WorkflowPhase.CLOSING)
        package = lookup_for_return(session, code or "")
        staff = validate_return_capture(staff_name)
        now = self.clock()
        updated, returned = update_package(
            session,
            package.id,
            lambda record: mark_returned(record, staff_name=staff, now=now),
        )
        logger.info("Returned %s to depot staff %s", returned.tracking_number, staff)
        return ActionResult(updated, accepted=True, package=returned)

    @_refusals_as_results
    def end_shift(self, session: ShiftSession) -> ActionResult:
        self._require_phase(session, WorkflowPhase.CLOSING)
        pending = non_terminal_packages(session)
        if pending:
            raise PendingPackagesError(f"{len(pending)} package(s) still need to be returned to the depot.")

        now = self.clock()
        attendance = replace(session.attendance, check_out=now) if session.attendance else None
        stats = compute_shift_stats(session)
        if self.archive is not None and attendance is not None:
            self._archive_shift(session, attendance, stats)

        self.prompter.notify(SHIFT_FINISHED_MESSAGE)
        logger.info("Shift ended for %s", session.user.id)
        return ActionResult(
            reset_session(session),
            accepted=True,
            notice=SHIFT_FINISHED_MESSAGE,
            detail={"attendance": attendance, "stats": stats},
        )

    # -- helpers ------------------------------------------------------------

    def _require_phase(self, session: ShiftSession, *phases: WorkflowPhase) -> None:
        if session.phase not in phases:
            allowed = ", ".join(phase.value for phase in phases)
            raise PhaseError(f"Not allowed while {session.phase.value}; expected {allowed}.")

    def _attendance_status(self, now: datetime) -> AttendanceStatus:
        late_after = self.config.late_after
        if late_after is not None and now.astimezone().time() > late_after:
            return AttendanceStatus.LATE
        return AttendanceStatus.PRESENT

    def _archive_shift(self, session: ShiftSession, attendance: AttendanceRecord, stats: Any) -> None:
        record = {
            "attendance": attendance,
            "summary": session.summary,
            "packages": list(session.packages),
            "stats": stats,
        }
        try:
            path = self.archive.save_shift(attendance.user_id, attendance.date, record)
        except (OSError, ValueError):
            logger.exception("Failed to archive shift for %s", attendance.user_id)
            return
        logger.info("Archived shift to %s", path)

    def _refuse(self, session: ShiftSession, action: str, error: ShiftError) -> ActionResult:
        logger.warning("%s refused for %s: %s", action, session.user.id, error.message)
        self.prompter.notify(error.message)
        return ActionResult(session, accepted=False, notice=error.message, code=error.code)


# -- read-only views ----------------------------------------------------------


def loading_progress(session: ShiftSession) -> ReconciliationResult:
    return reconcile(len(session.packages), session.summary.total_packages)


def pending_deliveries(session: ShiftSession) -> list[Package]:
    return [
        package
        for package in session.packages
        if package.status not in (PackageStatus.DELIVERED, PackageStatus.RETURNED)
    ]


def pending_returns(session: ShiftSession) -> list[Package]:
    return non_terminal_packages(session)


def search_packages(session: ShiftSession, query: Optional[str]) -> list[Package]:
    needle = (query or "").strip().lower()
    if not needle:
        return list(session.packages)
    return [
        package
        for package in session.packages
        if needle in package.tracking_number.lower() or needle in package.recipient_name.lower()
    ]