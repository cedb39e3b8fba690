"""FastAPI application entry point."""
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
from app.errors import register_exception_handlers
from app.logging_config import configure_logging

# Import routers
from app.routers import auth, schedules, participations, users

# Import all models so Base.metadata knows about them
from app.models.user import User, AdminBootstrap  # noqa: F401
from app.models.schedule import Schedule          # noqa: F401
from app.models.participation import Participation  # noqa: F401

configure_logging(settings)

app = FastAPI(
    title="Tennis Meetup Scheduler",
    description="Member registration with admin approval, meetup schedules and attendance tracking",
    version="1.0.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in settings.CORS_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(schedules.router, prefix="/api/schedules", tags=["Schedules"])
app.include_router(participations.router, prefix="/api/schedules", tags=["Participations"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {
        "success": True,
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)
