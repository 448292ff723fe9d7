"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from resumate.api.routes.match_routes import router as match_router
from resumate.api.routes.resume_routes import router as resume_router
from resumate.api.routes.alumni_routes import router as alumni_router
from resumate.api.routes.mentorship_routes import router as mentorship_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(match_router)
api_router.include_router(resume_router)
api_router.include_router(alumni_router)
api_router.include_router(mentorship_router)
