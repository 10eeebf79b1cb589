"""API v1 router composition."""

from fastapi import APIRouter

from hostel_food.api.v1.endpoints import admin, auth, manager, orders, reports, student, students, universities

api_router: APIRouter = APIRouter()
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(universities.router, prefix="/universities", tags=["universities"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
api_router.include_router(manager.router, prefix="/manager", tags=["manager"])
api_router.include_router(orders.router, prefix="/manager/orders", tags=["manager"])
api_router.include_router(students.router, prefix="/manager/students", tags=["manager"])
api_router.include_router(reports.router, prefix="/manager", tags=["manager"])
api_router.include_router(student.router, prefix="/student", tags=["student"])
