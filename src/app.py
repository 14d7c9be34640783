"""Main FastAPI application module.

This module initializes the FastAPI application and registers all route handlers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.logging_config import setup_logging
from config import (
    API_HOST,
    API_PORT,
    CORS_ALLOWED_ORIGINS,
    STORE_BACKEND,
)
from api.routes import auth, modules, profile, reminders, sessions, tutor

# Setup logging
setup_logging()

# Initialize FastAPI application
app = FastAPI(
    title="Study Tracker API",
    description="Backend API service for focus timing, learning modules and review reminders.",
    version="1.0.0",
)

# Configure CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register route handlers
app.include_router(auth.router)
app.include_router(modules.router)
app.include_router(sessions.router)
app.include_router(reminders.router)
app.include_router(profile.router)
app.include_router(tutor.router)


@app.get("/", summary="API root", tags=["Info"])
def root() -> dict:
    """API root path, returns API information and documentation links.

    Returns:
        Dictionary with API information and documentation links.
    """
    return {
        "name": "Study Tracker API",
        "version": "1.0.0",
        "description": "Backend API service for focus timing, learning modules and review reminders.",
        "docs": {
            "swagger": "/docs",
            "redoc": "/redoc",
        },
        "health": "/api/health",
    }


@app.get("/api/health", summary="Health check", tags=["Health"])
def health() -> dict:
    """Health check endpoint.

    Returns:
        Dictionary with status "ok" and the configured storage backend.
    """
    return {"status": "ok", "store_backend": STORE_BACKEND}


# --- Startup code for direct execution ---
if __name__ == "__main__":
    import uvicorn

    server_url = f"http://{API_HOST}:{API_PORT}"
    print(f"Starting Study Tracker API at {server_url}")
    print(f"API docs: {server_url}/docs")
    print()

    uvicorn.run("app:app", host=API_HOST, port=API_PORT, reload=True)
