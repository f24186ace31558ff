"""FastAPI application entry point."""

import warnings
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import (
    calendar_router,
    events_router,
    health_router,
    preferences_router,
    transfers_router,
)
from core import config
from core.config import API_DEBUG, API_VERSION
from core.database import create_tables, get_connection


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown."""
    # Startup: make sure the schema exists
    conn = get_connection()
    try:
        create_tables(conn)
    finally:
        conn.close()

    if not config.HEIMDALL_API_KEY:
        warnings.warn("HEIMDALL_API_KEY is not set; all /v1 requests will be rejected")

    yield


app = FastAPI(
    title="Heimdall Year Planner API",
    description="REST API for year planning: month grids, cyclic calendar, burnout and chain advisories",
    version=API_VERSION,
    debug=API_DEBUG,
    lifespan=lifespan,
)

# CORS middleware (for development)
if API_DEBUG:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# Global exception handler for unexpected errors
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions with standard error format."""
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code=ErrorCodes.INTERNAL_ERROR,
            details=[],
        ).model_dump(),
    )


# Include routers
app.include_router(health_router)
app.include_router(events_router)
app.include_router(calendar_router)
app.include_router(preferences_router)
app.include_router(transfers_router)


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
