"""Domain models for couriers, packages and shift records."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional


class Role(str, Enum):
    GUEST = "GUEST"
    COURIER = "COURIER"
    PIC = "PIC"
    ADMIN = "ADMIN"


class PackageStatus(str, Enum):
    PENDING = "PENDING"
    LOADED = "LOADED"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"
    RETURNED = "RETURNED"

    @property
    def is_terminal(self) -> bool:
        return self in (PackageStatus.DELIVERED, PackageStatus.RETURNED)


class PackageType(str, Enum):
    COD = "COD"
    NON_COD = "NON_COD"


class AttendanceStatus(str, Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"


class WorkflowPhase(str, Enum):
    """Courier workflow phases, in their only legal order."""

    ABSENT = "ABSENT"
    PLANNING = "PLANNING"
    LOADING = "LOADING"
    DELIVERING = "DELIVERING"
    CLOSING = "CLOSING"


@dataclass(frozen=True, slots=True)
class User:
    """Identity supplied by the login collaborator."""

    id: str
    name: str
    role: Role


@dataclass(frozen=True, slots=True)
class Coordinates:
    lat: float
    lng: float


@dataclass(frozen=True, slots=True)
class Package:
    """One physical parcel in the courier's custody during a shift."""

    id: str
    tracking_number: str
    type: PackageType
    recipient_name: str
    address: str
    phone_number: str
    coordinates: Coordinates
    status: PackageStatus
    timestamp: datetime
    cod_amount: int = 0
    proof_image: Optional[str] = None
    received_by: Optional[str] = None

    @property
    def is_cod(self) -> bool:
        return self.type is PackageType.COD


@dataclass(frozen=True, slots=True)
class ShiftSummary:
    """Manifest totals declared by the courier before loading."""

    total_cod: int = 0
    total_non_cod: int = 0
    total_packages: int = 0

    @property
    def declared_total(self) -> int:
        return self.total_cod + self.total_non_cod


@dataclass(frozen=True, slots=True)
class AttendanceRecord:
    id: str
    user_id: str
    date: date
    check_in: datetime
    status: AttendanceStatus
    check_out: Optional[datetime] = None
