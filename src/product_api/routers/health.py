import asyncio

from fastapi import APIRouter, Request

from product_api.schemas import HEALTHY_MESSAGE, HealthComponents, HealthResponse

router = APIRouter()


@router.get("/")
async def liveness() -> str:
    """Static liveness probe."""
    return HEALTHY_MESSAGE


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """
    Health check endpoint for monitoring API status and component readiness.

    Returns status of the API, the database and the media bucket.
    """
    submission_service = request.app.state.submission_service
    uploader = request.app.state.uploader

    components = HealthComponents()
    status = "ok"

    # Check database status
    if await asyncio.to_thread(submission_service.is_healthy):
        components.database = "ready"
    else:
        components.database = "error: ping failed"
        status = "degraded"

    # Check storage status
    try:
        await asyncio.to_thread(uploader.check_bucket)
        components.storage = "ready"
    except Exception as e:
        components.storage = f"error: {str(e)}"
        status = "degraded"

    ready = all(
        value == "ready"
        for value in (components.api, components.database, components.storage)
    )
    return HealthResponse(status=status, components=components, ready=ready)
