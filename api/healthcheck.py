from fastapi import APIRouter
from utils.constants import SOLVER_TIMEOUT_SECONDS, SOLVER_WORKERS

router = APIRouter(prefix="/health", tags=["Health Check"])


@router.get("/check", summary="Health Check")
def healthcheck():
    return {
        "status": "ok",
        "solver": {"timeout": SOLVER_TIMEOUT_SECONDS, "workers": SOLVER_WORKERS},
    }
