from typing import List
from fastapi import APIRouter, HTTPException
from schemas.schedule.records import AssignmentIn, DemandIn
from schemas.closing.assign import ClosingRequest
from closing import assign_closing_roles
from exceptions.custom_errors import *
import traceback
from docs.closing.assign import closing_assign_description

router = APIRouter(prefix="/closing", tags=["Closing"])


@router.post(
    "/assign",
    response_model=dict,
    description=closing_assign_description,
    summary="Assign Closing Roles",
)
async def closing_assign(
    assignments: List[AssignmentIn],
    doctorDemand: List[DemandIn],
    request: ClosingRequest,
):
    try:
        result = assign_closing_roles(
            [a.to_entity() for a in assignments],
            request.closureSites,
            [d.to_entity() for d in doctorDemand],
            finalized_dates=request.finalizedDates,
            prior_scores={w: s.model_dump() for w, s in request.priorScores.items()},
            tertiary_weekdays=request.tertiaryWeekdays,
            tertiary_doctor_ids=request.tertiaryDoctorIds,
            max_iterations=request.maxIterations,
        )
        return result.to_dict()

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")
