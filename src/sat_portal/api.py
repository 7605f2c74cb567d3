from fastapi import APIRouter

from sat_portal.modules.auth import router as auth_router
from sat_portal.modules.documents.router import router as documents_router
from sat_portal.modules.internships.router import router as internships_router
from sat_portal.modules.lecturers.router import router as lecturers_router
from sat_portal.modules.notifications.router import router as notifications_router
from sat_portal.modules.requirements.router import router as requirements_router
from sat_portal.modules.theses.lecturer_router import router as lecturer_theses_router
from sat_portal.modules.theses.router import router as theses_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])

api_router.include_router(theses_router, prefix="/theses", tags=["Theses"])

api_router.include_router(
    lecturer_theses_router,
    prefix="/lecturer/theses",
    tags=["Lecturer - Theses"],
)

api_router.include_router(internships_router, prefix="/internships", tags=["Internships"])

api_router.include_router(lecturers_router, prefix="/lecturers", tags=["Lecturers"])

api_router.include_router(requirements_router, prefix="/requirements", tags=["Requirements"])

api_router.include_router(
    notifications_router, prefix="/notifications", tags=["Notifications"]
)

api_router.include_router(documents_router, prefix="/documents", tags=["Documents"])
