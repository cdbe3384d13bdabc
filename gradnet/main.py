from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from gradnet.config import frontend_url, log_level, validate_settings
from gradnet.routes import admin, announcements, auth, dashboard, directory, messages, profiles

logging.basicConfig(level=log_level())
validate_settings()

app = FastAPI(
    redirect_slashes=False,
    title="GradNet API",
    description="API for the GradNet alumni network",
    version="1.0.0",
    openapi_tags=[
        {
            "name": "Messages",
            "description": "Direct messages and conversation threads",
        },
        {
            "name": "Admin",
            "description": "Administrator-only statistics",
        },
    ],
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[frontend_url()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/auth")
app.include_router(dashboard.router, prefix="/dashboard")
app.include_router(profiles.router, prefix="/profile")
app.include_router(directory.router, prefix="/directory")
app.include_router(messages.router, prefix="/messages", tags=["Messages"])
app.include_router(announcements.router, prefix="/announcements")
app.include_router(admin.router, prefix="/admin", tags=["Admin"])
