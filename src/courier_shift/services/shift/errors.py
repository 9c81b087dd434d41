"""Exceptions raised by the shift workflow when an action must be refused."""

from __future__ import annotations


class ShiftError(ValueError):
    """Base class for non-fatal workflow refusals.

    ``code`` is a stable identifier for API clients; ``message`` is the notice
    shown to the courier.
    """

    code = "shift_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PhaseError(ShiftError):
    code = "invalid_phase"


class RoleNotAllowedError(ShiftError):
    code = "role_not_allowed"


class ManifestValidationError(ShiftError):
    code = "manifest_invalid"


class InvalidTrackingCodeError(ShiftError):
    code = "tracking_code_invalid"


class DuplicateScanError(ShiftError):
    code = "duplicate_scan"


class EmptyLoadError(ShiftError):
    code = "nothing_loaded"


class PackageNotFoundError(ShiftError):
    code = "package_not_found"


class AlreadyDeliveredError(ShiftError):
    code = "already_delivered"


class PackageTerminalError(ShiftError):
    code = "package_terminal"


class CompletionValidationError(ShiftError):
    code = "completion_invalid"


class PendingPackagesError(ShiftError):
    code = "packages_pending"


class ScannerBusyError(ShiftError):
    code = "scanner_busy"
