from fastapi import APIRouter

from student_registry.routers.health import health_router
from student_registry.routers.students import students_router

main_router = APIRouter()
main_router.include_router(health_router, prefix="/health", tags=["health"])
main_router.include_router(students_router, prefix="/students", tags=["students"])
