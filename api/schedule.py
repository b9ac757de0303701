from schemas.schedule.records import (
    AbsenceIn,
    AssignmentIn,
    DemandIn,
    ProcedureIn,
    ShiftIn,
    WorkerProfile,
)
from schemas.schedule.requests import (
    BaseScheduleRequest,
    BlocRequest,
    FloaterRequest,
    SiteCoverageRequest,
    WeekRequest,
)
from typing import List
from fastapi import APIRouter, HTTPException
from scheduler.scenarios import (
    WhatIfScenario,
    run_base_schedule,
    run_floater_placement,
    run_or_personnel,
    run_site_coverage,
)
from scheduler.pipeline import run_week_pipeline
from utils.validate import validate_references
from utils.logger import get_logger
from exceptions.custom_errors import *
import traceback
from docs.schedule.scenarios import (
    schedule_base_description,
    schedule_bloc_description,
    schedule_floaters_description,
    schedule_sites_description,
    schedule_week_description,
)

router = APIRouter(prefix="/schedule", tags=["Schedule"])
logger = get_logger(__name__)


def _workers(workers: List[WorkerProfile], *referenced):
    """Convert profiles and check every referenced worker id exists."""
    entities = [w.to_entity() for w in workers]
    ids = [w.id for w in entities]
    for name, records in referenced:
        note = validate_references(ids, [r.workerId for r in records], "workers", name)
        if note:
            logger.info(note)
    return entities


# base recurring schedule
@router.post(
    "/base",
    response_model=dict,
    description=schedule_base_description,
    summary="Base Schedule",
)
async def schedule_base(
    workers: List[WorkerProfile],
    shifts: List[ShiftIn],
    demands: List[DemandIn],
    request: BaseScheduleRequest,
):
    try:
        what_if = None
        if request.whatIf:
            what_if = WhatIfScenario(
                fictional_workers=[w.to_entity() for w in request.whatIf.fictionalWorkers],
                fictional_shifts=[s.to_entity() for s in request.whatIf.fictionalShifts],
                fictional_demands=[d.to_entity() for d in request.whatIf.fictionalDemands],
            )
        result = run_base_schedule(
            _workers(workers, ("shifts", shifts)),
            [s.to_entity() for s in shifts],
            [d.to_entity() for d in demands],
            what_if=what_if,
            timeout=request.timeout,
        )
        return result.to_dict()

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# ad-hoc site coverage
@router.post(
    "/sites",
    response_model=dict,
    description=schedule_sites_description,
    summary="Site Coverage",
)
async def schedule_sites(
    workers: List[WorkerProfile],
    shifts: List[ShiftIn],
    demands: List[DemandIn],
    absences: List[AbsenceIn],
    request: SiteCoverageRequest,
):
    try:
        result = run_site_coverage(
            _workers(workers, ("shifts", shifts), ("absences", absences)),
            [s.to_entity() for s in shifts],
            [d.to_entity() for d in demands],
            absences=[a.to_entity() for a in absences],
            blocked_slots={s.to_key() for s in request.blockedSlots},
            closure_sites=request.closureSites,
            allow_admin=request.allowAdmin,
            reluctant_sites=request.reluctantSites,
            timeout=request.timeout,
        )
        return result.to_dict()

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# operating-room personnel
@router.post(
    "/bloc",
    response_model=dict,
    description=schedule_bloc_description,
    summary="Operating Room Personnel",
)
async def schedule_bloc(
    workers: List[WorkerProfile],
    shifts: List[ShiftIn],
    procedures: List[ProcedureIn],
    absences: List[AbsenceIn],
    request: BlocRequest,
):
    try:
        result = run_or_personnel(
            _workers(workers, ("shifts", shifts), ("absences", absences)),
            [s.to_entity() for s in shifts],
            [p.to_entity() for p in procedures],
            request.requirements,
            absences=[a.to_entity() for a in absences],
            role_capabilities=request.roleCapabilities,
            timeout=request.timeout,
        )
        return result.to_dict()

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# flexible floater placement
@router.post(
    "/floaters",
    response_model=dict,
    description=schedule_floaters_description,
    summary="Floater Placement",
)
async def schedule_floaters(
    workers: List[WorkerProfile],
    currentAssignments: List[AssignmentIn],
    demands: List[DemandIn],
    absences: List[AbsenceIn],
    request: FloaterRequest,
):
    try:
        result = run_floater_placement(
            _workers(workers, ("current assignments", currentAssignments), ("absences", absences)),
            [a.to_entity() for a in currentAssignments],
            [d.to_entity() for d in demands],
            week_start=request.weekStart,
            holidays=request.holidays,
            absences=[a.to_entity() for a in absences],
            quota_overrides=request.quotaOverrides,
            timeout=request.timeout,
        )
        return result.to_dict()

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")


# whole horizon: bloc -> sites -> closing roles
@router.post(
    "/week",
    response_model=dict,
    description=schedule_week_description,
    summary="Week Pipeline",
)
async def schedule_week(
    workers: List[WorkerProfile],
    shifts: List[ShiftIn],
    demands: List[DemandIn],
    procedures: List[ProcedureIn],
    absences: List[AbsenceIn],
    request: WeekRequest,
):
    try:
        plan = run_week_pipeline(
            _workers(workers, ("shifts", shifts), ("absences", absences)),
            [s.to_entity() for s in shifts],
            [d.to_entity() for d in demands],
            [p.to_entity() for p in procedures],
            request.requirements,
            closure_sites=request.closureSites,
            absences=[a.to_entity() for a in absences],
            role_capabilities=request.roleCapabilities,
            allow_admin=request.allowAdmin,
            reluctant_sites=request.reluctantSites,
            finalized_dates=request.finalizedDates,
            prior_scores={w: s.model_dump() for w, s in request.priorScores.items()},
            tertiary_weekdays=request.tertiaryWeekdays,
            tertiary_doctor_ids=request.tertiaryDoctorIds,
            timeout=request.timeout,
        )
        return plan.to_dict()

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")
