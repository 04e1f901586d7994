from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from student_registry.config.settings import settings
from student_registry.utils.logging import get_logger
from student_registry.routers import main_router
from student_registry.services.record_store import RecordStore
from student_registry.utils.errors import setup_error_handlers
from student_registry.middlewares import RequestIDMiddleware

# Initialize the logger
logger = get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    logger.info(f"{settings.NAME} is starting up...")
    yield
    logger.info(
        f"{settings.NAME} is shutting down, discarding {application.state.record_store.count()} students"
    )


def create_application() -> FastAPI:
    """Initialize the FastAPI application with its own empty record store."""
    application = FastAPI(
        title=settings.NAME, version=settings.VERSION, lifespan=lifespan
    )
    application.state.record_store = RecordStore()

    # Setup error handlers
    setup_error_handlers(application)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    application.add_middleware(RequestIDMiddleware)

    application.include_router(main_router, prefix=settings.API_PREFIX, tags=["APIs"])

    return application


app = create_application()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "student_registry.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_config=None,
        log_level=None,
    )
