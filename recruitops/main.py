import os
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from recruitops.routers import activity, candidates, documents, sourcing, unvetted

from recruitops.utils.logging_config import configure_for_environment, get_logger
from recruitops.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
)

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("RecruitOps API starting up...")

    try:
        from recruitops.services.db import init_indexes
        await init_indexes()
        logger.info("Database indexes initialized successfully")
    except Exception as e:
        logger.warning(f"Database index initialization had issues: {e}")
        logger.info("Application will continue - duplicate staging is then only guarded per request")

    if not os.getenv("BRAVE_SEARCH_API_KEY"):
        logger.warning("BRAVE_SEARCH_API_KEY not set - sourcing runs will return synthetic candidates only")

    yield

    logger.info("RecruitOps API shutting down...")

app = FastAPI(title="RecruitOps API", version=API_VERSION, lifespan=lifespan)

# The last middleware added is the outermost; the exception handler wraps the rest.
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    """Root endpoint - handles both GET and HEAD requests for health checks"""
    return {"message": "Welcome to the RecruitOps API", "version": API_VERSION, "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    return {"status": "healthy", "timestamp": datetime.utcnow().isoformat()}

app.include_router(sourcing.router, prefix="/api/sourcing", tags=["sourcing"])
app.include_router(candidates.router, prefix="/api/candidates", tags=["candidates"])
app.include_router(unvetted.router, prefix="/api/unvetted", tags=["unvetted"])
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(activity.router, prefix="/api/activity", tags=["activity"])

logger.info("RecruitOps API initialized successfully")
