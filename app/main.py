"""
SubTrack FastAPI Application
"""

import logging
import time
from datetime import datetime, timezone
from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.api.deps import get_db
from app.api.pages import router as pages_router
from app.api.v1.router import api_router
from app.core.database import init_models
from app.core.gate import request_gate
import app.models

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="Subscription, expense and savings tracking API",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Request gate runs inside CORS so rejected requests still carry CORS headers
app.middleware("http")(request_gate)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Field-level 400 instead of FastAPI's default 422"""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation failed", "details": details}
    )

@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Operation failed"}
    )

# Include routers
app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(pages_router, tags=["pages"])

@app.on_event("startup")
async def startup_event():
    """Initialize on startup"""
    logger.info(f"Starting {settings.PROJECT_NAME} v{settings.VERSION} ({settings.ENVIRONMENT})")

    # Create database tables
    await init_models()

    logger.info("Database initialized")

@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown"""
    logger.info("Shutting down...")

@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Health check endpoint: one trivial query against the store"""
    start = time.perf_counter()
    try:
        await db.execute(text("SELECT 1"))
        database = "connected"
        status_code = status.HTTP_200_OK
    except SQLAlchemyError as e:
        logger.error(f"Health check database query failed: {e}")
        database = "unreachable"
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return JSONResponse(
        status_code=status_code,
        content={
            "status": "healthy" if status_code == status.HTTP_200_OK else "unhealthy",
            "database": database,
            "latency_ms": round((time.perf_counter() - start) * 1000, 2),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "environment": settings.ENVIRONMENT,
            "version": settings.VERSION
        }
    )

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=not settings.is_production
    )
