import random
from typing import List
from fastapi import APIRouter, HTTPException
from schemas.schedule.records import ProcedureIn
from schemas.rooms.allocate import RoomRequest
from scheduler.rooms import RoomLayout, allocate_rooms
from exceptions.custom_errors import *
import traceback
from docs.rooms.allocate import rooms_allocate_description

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.post(
    "/allocate",
    response_model=dict,
    description=rooms_allocate_description,
    summary="Allocate Rooms",
)
async def rooms_allocate(procedures: List[ProcedureIn], request: RoomRequest):
    try:
        result = allocate_rooms(
            [p.to_entity() for p in procedures],
            layouts=[
                RoomLayout(l.procedureType, l.flowCount, tuple(l.rooms)) for l in request.layouts
            ],
            preferred_rooms=request.preferredRooms,
            rooms=request.rooms,
            rng=random.Random(request.seed) if request.seed is not None else None,
        )
        return result.to_dict()

    except tuple(CUSTOM_ERRORS) as e:
        raise HTTPException(status_code=CUSTOM_ERRORS[type(e)], detail=str(e))
    except Exception as e:
        tb = traceback.format_exc()
        raise HTTPException(status_code=500, detail=f"{str(e)}\n\nTraceback:\n{tb}")
