"""
FastAPI application entry point.

Run with: uvicorn api.main:app --reload
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

# Load environment variables from backend/.env (optional) before other imports that read env
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(env_path)

from api.routes import layout, settings as settings_routes
from db import init_db
from settings import settings

logging.basicConfig(
    level=logging.DEBUG if settings.LAYOUT_DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# Create app
app = FastAPI(
    title="Photo Book Layout API",
    description="API for computing print-ready photo book layouts",
    version="0.1.0",
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount static files for media
media_path = Path(settings.MEDIA_ROOT)
media_path.mkdir(parents=True, exist_ok=True)
app.mount("/media", StaticFiles(directory=str(media_path)), name="media")

# Include routers
app.include_router(layout.router, prefix="/layout", tags=["layout"])
app.include_router(settings_routes.router, tags=["settings"])


@app.on_event("startup")
def startup_event():
    """Initialize database tables on startup."""
    init_db()


@app.get("/")
async def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "Photo Book Layout API"}


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
