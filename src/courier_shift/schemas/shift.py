"""Pydantic request/response models for the courier shift endpoints."""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import AttendanceStatus, PackageStatus, PackageType, Role, WorkflowPhase
from ..persistence.filesystem import USER_ID_PATTERN
from ..services.shift.reconciliation import Classification

CountInput = Union[int, float, str, None]


class SessionRequest(BaseModel):
    user_id: str = Field(
        ...,
        pattern=f"^{USER_ID_PATTERN.pattern}$",
        description="Identity supplied by the login collaborator.",
    )
    name: str = Field(..., min_length=1)
    role: Role = Role.COURIER


class ManifestRequest(BaseModel):
    total_cod: CountInput = Field(default=0, description="Declared COD packages; non-numeric input counts as 0.")
    total_non_cod: CountInput = Field(default=0, description="Declared non-COD packages.")


class ScanRequest(BaseModel):
    tracking_number: str = Field(default="", description="Code produced by the scanner or typed manually.")


class ConfirmRequest(BaseModel):
    confirm: bool = Field(default=False, description="Courier's answer to the confirmation question.")


class DeliveryRequest(BaseModel):
    tracking_number: str
    proof_image: Optional[str] = Field(default=None, description="Reference to the proof-of-delivery photo.")
    received_by: Optional[str] = Field(default=None, description="Name of the person who took the package.")


class ReturnRequest(BaseModel):
    tracking_number: str
    staff_name: Optional[str] = Field(default=None, description="Depot staff receiving the package.")


class CoordinatesModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    lat: float
    lng: float


class PackageModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tracking_number: str
    type: PackageType
    cod_amount: int = 0
    recipient_name: str
    address: str
    phone_number: str
    coordinates: CoordinatesModel
    status: PackageStatus
    timestamp: datetime
    proof_image: Optional[str] = None
    received_by: Optional[str] = None


class SummaryModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_cod: int
    total_non_cod: int
    total_packages: int


class AttendanceModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    day: date = Field(..., validation_alias="date", serialization_alias="date")
    check_in: datetime
    check_out: Optional[datetime] = None
    status: AttendanceStatus


class ReconciliationModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    loaded_count: int
    declared_total: int
    classification: Classification
    message: str
    difference: int


class ShiftStateModel(BaseModel):
    user_id: str
    phase: WorkflowPhase
    summary: SummaryModel
    attendance: Optional[AttendanceModel] = None
    packages: List[PackageModel]
    progress: Optional[ReconciliationModel] = None


class ActionResponse(BaseModel):
    accepted: bool
    phase: WorkflowPhase
    notice: Optional[str] = None
    code: Optional[str] = None
    question: Optional[str] = Field(default=None, description="Confirmation asked of the courier, if any.")
    package: Optional[PackageModel] = None
    reconciliation: Optional[ReconciliationModel] = None
    shift: ShiftStateModel


class StatsModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total: int
    loaded: int
    delivered: int
    failed: int
    returned: int
    remaining: int
    cod_collected: int
    cod_outstanding: int
    success_rate: float


class PackageLinksModel(BaseModel):
    tracking_number: str
    whatsapp: str
    maps: str
