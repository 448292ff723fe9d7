"""
API module - FastAPI routers and service dependencies.

Usage:
    from resumate.api.routes import api_router
    app.include_router(api_router, prefix="/api")
"""
