from fastapi import APIRouter, Request

from student_registry.config.settings import settings
from student_registry.utils.responses import ResponseBuilder

health_router = APIRouter()


@health_router.get("")
async def health_check(request: Request):
    """
    Basic health check endpoint

    Returns application status and the number of records currently held
    """
    return ResponseBuilder.success(
        request=request,
        data={
            "status": "healthy",
            "service": settings.NAME,
            "version": settings.VERSION,
            "records": request.app.state.record_store.count(),
        },
        message="Service is running",
    )
