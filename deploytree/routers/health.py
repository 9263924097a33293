from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from deploytree.config import VERSION, Settings
from deploytree.models import HealthResponse, ReadyResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(ok=True, version=VERSION)


@router.get(
    "/ready",
    response_model=ReadyResponse,
    responses={503: {"model": ReadyResponse, "description": "Engine connection is not configured"}},
)
async def ready():
    # readiness only checks configuration; the engine itself is not contacted
    problems = Settings.from_env().problems()
    if problems:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=ReadyResponse(ready=False, reason="; ".join(problems)).model_dump(),
        )
    return ReadyResponse(ready=True)
