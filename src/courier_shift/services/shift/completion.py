"""Per-package delivery and return completion rules."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional

from ...models.domain import Package, PackageStatus
from .errors import (
    AlreadyDeliveredError,
    CompletionValidationError,
    PackageNotFoundError,
    PackageTerminalError,
)
from .session import ShiftSession


def lookup_for_delivery(session: ShiftSession, code: str) -> Package:
    """Find the package a courier scanned or typed at the recipient's door."""
    package = session.find_ignore_case(code or "")
    if package is None:
        raise PackageNotFoundError(f"Package {code!r} is not in your manifest.")
    if package.status is PackageStatus.DELIVERED:
        raise AlreadyDeliveredError(f"Package {package.tracking_number} was already delivered.")
    if package.status is PackageStatus.RETURNED:
        raise PackageTerminalError(f"Package {package.tracking_number} was already returned to the depot.")
    return package


def validate_delivery_capture(proof_image: Optional[str], received_by: Optional[str]) -> tuple[str, str]:
    missing = []
    if not (proof_image or "").strip():
        missing.append("proof photo")
    if not (received_by or "").strip():
        missing.append("recipient name")
    if missing:
        raise CompletionValidationError(f"Delivery needs a {' and a '.join(missing)}.")
    return proof_image.strip(), received_by.strip()


def mark_delivered(
    package: Package,
    *,
    proof_image: str,
    received_by: str,
    now: datetime,
    overwrite_recipient: bool = False,
) -> Package:
    changes = {
        "status": PackageStatus.DELIVERED,
        "proof_image": proof_image,
        "received_by": received_by,
        "timestamp": now,
    }
    if overwrite_recipient:
        changes["recipient_name"] = received_by
    return replace(package, **changes)


def lookup_for_return(session: ShiftSession, code: str) -> Package:
    package = session.find_ignore_case(code or "")
    if package is None:
        raise PackageNotFoundError(f"Package {code!r} is not in your manifest.")
    if package.status.is_terminal:
        raise PackageTerminalError(
            f"Package {package.tracking_number} is already {package.status.value} and cannot be returned."
        )
    return package


def validate_return_capture(staff_name: Optional[str]) -> str:
    if not (staff_name or "").strip():
        raise CompletionValidationError("Return needs the name of the receiving depot staff.")
    return staff_name.strip()


def mark_returned(package: Package, *, staff_name: str, now: datetime) -> Package:
    return replace(package, status=PackageStatus.RETURNED, received_by=staff_name, timestamp=now)


def mark_failed(package: Package, *, now: datetime) -> Package:
    return replace(package, status=PackageStatus.FAILED, timestamp=now)
