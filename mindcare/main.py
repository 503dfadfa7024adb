# mindcare local api
# fastapi companion app over the local key-value store and progress engines

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mindcare.config import settings
from mindcare.dependencies import init_services
from mindcare.routers import activities, progress, streak, therapists
from mindcare.services.store import StoreError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: open the configured store and wire the engines"""
    logger.info(f"Starting MindCare API with '{settings.STORE_BACKEND}' store...")
    init_services()
    logger.info("MindCare API ready")
    yield
    logger.info("Shutting down MindCare API...")


app = FastAPI(
    title="MindCare API",
    description="Local API for therapy progress, activity streaks and therapist progress reports",
    version="0.1.0",
    lifespan=lifespan,
)

# cors: allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(streak.router)
app.include_router(progress.router)
app.include_router(therapists.router)
app.include_router(activities.router)


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"Store failure on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Local store unavailable"},
    )


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "mindcare-api"}
