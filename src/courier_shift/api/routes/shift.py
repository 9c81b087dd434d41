"""Courier shift endpoints.

One courier session lives on ``app.state``. Questions the workflow would ask
the courier are answered by the ``confirm`` flag of the request; a call with
``confirm: false`` returns the question so the client can ask and resend.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, Request, status

from ...models.domain import User, WorkflowPhase
from ...schemas.shift import (
    ActionResponse,
    AttendanceModel,
    ConfirmRequest,
    DeliveryRequest,
    ManifestRequest,
    PackageLinksModel,
    PackageModel,
    ReconciliationModel,
    ReturnRequest,
    ScanRequest,
    SessionRequest,
    ShiftStateModel,
    StatsModel,
    SummaryModel,
)
from ...services.shift import errors
from ...services.shift.links import maps_link, whatsapp_link
from ...services.shift.prompts import PresetPrompter
from ...services.shift.session import ActionResult, ShiftSession, open_session
from ...services.shift.stats import compute_shift_stats
from ...services.shift.workflow import ShiftWorkflow, loading_progress, search_packages

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shift", tags=["shift"])

_STATUS_BY_CODE = {
    errors.RoleNotAllowedError.code: status.HTTP_403_FORBIDDEN,
    errors.PackageNotFoundError.code: status.HTTP_404_NOT_FOUND,
    errors.ManifestValidationError.code: status.HTTP_400_BAD_REQUEST,
    errors.InvalidTrackingCodeError.code: status.HTTP_400_BAD_REQUEST,
    errors.CompletionValidationError.code: status.HTTP_400_BAD_REQUEST,
    errors.EmptyLoadError.code: status.HTTP_400_BAD_REQUEST,
}


def _current_session(request: Request) -> ShiftSession:
    session: Optional[ShiftSession] = getattr(request.app.state, "shift_session", None)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": "no_session", "message": "No courier session. Start one with POST /shift/session."},
        )
    return session


def _workflow(request: Request, prompter: PresetPrompter) -> ShiftWorkflow:
    return ShiftWorkflow(
        prompter,
        classifier=request.app.state.classifier,
        archive=request.app.state.archive,
    )


def _state(session: ShiftSession) -> ShiftStateModel:
    progress = None
    if session.phase is WorkflowPhase.LOADING:
        progress = ReconciliationModel.model_validate(loading_progress(session))
    return ShiftStateModel(
        user_id=session.user.id,
        phase=session.phase,
        summary=SummaryModel.model_validate(session.summary),
        attendance=AttendanceModel.model_validate(session.attendance) if session.attendance else None,
        packages=[PackageModel.model_validate(package) for package in session.packages],
        progress=progress,
    )


def _respond(request: Request, result: ActionResult, prompter: PresetPrompter) -> ActionResponse:
    if not result.accepted and result.code != "cancelled":
        raise HTTPException(
            status_code=_STATUS_BY_CODE.get(result.code, status.HTTP_409_CONFLICT),
            detail={"code": result.code, "message": result.notice},
        )
    request.app.state.shift_session = result.session
    reconciliation = result.detail.get("reconciliation")
    return ActionResponse(
        accepted=result.accepted,
        phase=result.session.phase,
        notice=result.notice,
        code=result.code,
        question=prompter.questions[-1] if prompter.questions else None,
        package=PackageModel.model_validate(result.package) if result.package else None,
        reconciliation=ReconciliationModel.model_validate(reconciliation) if reconciliation else None,
        shift=_state(result.session),
    )


def _run(request: Request, action: str, *args, confirm: bool = False) -> ActionResponse:
    # sync endpoints run in the thread pool; the session swap must not interleave
    with request.app.state.shift_lock:
        session = _current_session(request)
        prompter = PresetPrompter(accept=confirm)
        workflow = _workflow(request, prompter)
        result = getattr(workflow, action)(session, *args)
        return _respond(request, result, prompter)


@router.post("/session", response_model=ShiftStateModel, status_code=status.HTTP_201_CREATED)
def start_session(payload: SessionRequest, request: Request) -> ShiftStateModel:
    with request.app.state.shift_lock:
        current: Optional[ShiftSession] = getattr(request.app.state, "shift_session", None)
        if current is not None and current.phase is not WorkflowPhase.ABSENT:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail={"code": "shift_in_progress", "message": f"Courier {current.user.id} has a shift in progress."},
            )
        try:
            session = open_session(User(id=payload.user_id, name=payload.name, role=payload.role))
        except errors.RoleNotAllowedError as exc:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={"code": exc.code, "message": exc.message},
            ) from exc
        request.app.state.shift_session = session
    logger.info("Session opened for %s", session.user.id)
    return _state(session)


@router.get("", response_model=ShiftStateModel)
def get_shift(request: Request) -> ShiftStateModel:
    return _state(_current_session(request))


@router.post("/check-in", response_model=ActionResponse)
def check_in(request: Request) -> ActionResponse:
    return _run(request, "check_in")


@router.put("/manifest", response_model=ActionResponse)
def declare_manifest(payload: ManifestRequest, request: Request) -> ActionResponse:
    return _run(request, "declare_manifest", payload.total_cod, payload.total_non_cod)


@router.post("/manifest/confirm", response_model=ActionResponse)
def confirm_manifest(request: Request) -> ActionResponse:
    return _run(request, "confirm_manifest")


@router.post("/scans", response_model=ActionResponse)
def scan_package(payload: ScanRequest, request: Request) -> ActionResponse:
    return _run(request, "scan_package", payload.tracking_number)


@router.post("/scans/camera", response_model=ActionResponse)
async def scan_with_camera(request: Request) -> ActionResponse:
    """Wait for the scanner to produce a code, then load it."""
    _current_session(request)
    scanner = request.app.state.scanner
    try:
        code = await scanner.scan()
    except errors.ScannerBusyError as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": exc.code, "message": exc.message},
        ) from exc
    except asyncio.CancelledError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": "scan_cancelled", "message": "Scan was closed before a code was read."},
        ) from None
    return _run(request, "scan_package", code)


@router.delete("/scans/camera", status_code=status.HTTP_200_OK)
async def cancel_camera_scan(request: Request) -> dict:
    cancelled = request.app.state.scanner.cancel()
    return {"cancelled": cancelled}


@router.post("/start-delivery", response_model=ActionResponse)
def start_delivery(payload: ConfirmRequest, request: Request) -> ActionResponse:
    return _run(request, "request_start_delivery", confirm=payload.confirm)


@router.get("/packages", response_model=list[PackageModel])
def list_packages(
    request: Request,
    search: str | None = Query(default=None, description="Match tracking number or recipient name"),
) -> list[PackageModel]:
    session = _current_session(request)
    return [PackageModel.model_validate(package) for package in search_packages(session, search)]


@router.get("/packages/{tracking_number}/links", response_model=PackageLinksModel)
def package_links(tracking_number: str, request: Request) -> PackageLinksModel:
    session = _current_session(request)
    package = session.find_ignore_case(tracking_number)
    if package is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": errors.PackageNotFoundError.code, "message": f"Package {tracking_number!r} is not in your manifest."},
        )
    return PackageLinksModel(
        tracking_number=package.tracking_number,
        whatsapp=whatsapp_link(package),
        maps=maps_link(package),
    )


@router.post("/deliveries/lookup", response_model=ActionResponse)
def lookup_delivery(payload: ScanRequest, request: Request) -> ActionResponse:
    return _run(request, "find_for_delivery", payload.tracking_number)


@router.post("/deliveries", response_model=ActionResponse)
def complete_delivery(payload: DeliveryRequest, request: Request) -> ActionResponse:
    return _run(request, "complete_delivery", payload.tracking_number, payload.proof_image, payload.received_by)


@router.post("/finish-delivery", response_model=ActionResponse)
def finish_delivery(payload: ConfirmRequest, request: Request) -> ActionResponse:
    return _run(request, "request_finish_delivery", confirm=payload.confirm)


@router.post("/returns", response_model=ActionResponse)
def complete_return(payload: ReturnRequest, request: Request) -> ActionResponse:
    return _run(request, "complete_return", payload.tracking_number, payload.staff_name)


@router.post("/end", response_model=ActionResponse)
def end_shift(request: Request) -> ActionResponse:
    return _run(request, "end_shift")


@router.get("/stats", response_model=StatsModel)
def shift_stats(request: Request) -> StatsModel:
    return StatsModel.model_validate(compute_shift_stats(_current_session(request)))
