"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from careerbridge.api.routes.auth_routes import router as auth_router
from careerbridge.api.routes.job_routes import router as job_router
from careerbridge.api.routes.student_routes import router as student_router
from careerbridge.api.routes.employer_routes import router as employer_router
from careerbridge.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(job_router)
api_router.include_router(student_router)
api_router.include_router(employer_router)
api_router.include_router(admin_router)
