"""
ResuMate - Main Application

FastAPI backend with:
- MongoDB for all persisted data
- n8n webhook for resume parsing
- Anthropic / Groq / DeepSeek for matching and resume insights
- Rule-based fallback scoring when no AI provider answers
- Header-based (x-user-id) authentication

Run: uvicorn resumate.main:app --reload
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from resumate.api.routes import api_router
from resumate.core.config import get_settings
from resumate.core.exceptions import InvalidProfile
from resumate.core.logging_config import setup_logging
from resumate.db.mongodb import init_mongo_indexes, test_mongo_connection

settings = get_settings()
setup_logging(settings.log_level, settings.log_file)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="ResuMate",
    description="""
    Student-alumni mentorship and placement platform.

    ## Features
    - **Matching**: Student-mentor and student-job ranking with AI scoring
      and rule-based fallback
    - **Resume**: n8n parsing, ATS analysis, JD matching, keyword extraction
    - **Alumni**: Directory search, filters and statistics
    - **Mentorship**: Session requests and lifecycle, two-way feedback, impact leaderboard and admin stats
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(InvalidProfile)
async def invalid_profile_handler(request: Request, exc: InvalidProfile):
    return JSONResponse(status_code=422, content={"detail": exc.reason})


# Startup event
@app.on_event("startup")
async def startup_event():
    """Initialize MongoDB indexes on startup."""
    logger.info("AI provider: %s", settings.resolved_provider())
    try:
        init_mongo_indexes()
    except PyMongoError as e:
        logger.warning("MongoDB index initialization failed: %s", e)


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    return {
        "status": "healthy",
        "mongodb": "connected" if test_mongo_connection() else "disconnected",
        "ai_provider": settings.resolved_provider(),
    }
