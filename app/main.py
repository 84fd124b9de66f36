from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.v1.router import api_router
from app.core.exceptions import DocumentError
from app.database import init_db, async_session_factory


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(levelname)s - %(name)s - %(message)s',
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
    - Create missing tables
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    await init_db()

    yield

    # Shutdown
    logger.info("Shutting down...")


# OpenAPI Tags with detailed descriptions
OPENAPI_TAGS = [
    {"name": "Purchase Orders", "description": "Atomic creation of purchase orders with currency conversion"},
    {"name": "Delivery Notes", "description": "Atomic creation of delivery notes linked to purchase order items"},
    {"name": "Saved Documents", "description": "Most recently saved orders and delivery notes"},
    {"name": "Vendors", "description": "Vendor master data with bank details"},
    {"name": "Recipients", "description": "Recipient master data and authorised vendors"},
    {"name": "Articles", "description": "Materials used as order line items"},
    {"name": "Reference Data", "description": "Units, tax codes and exchange rates"},
    {"name": "Health", "description": "Service and database health"},
]

FULL_API_DESCRIPTION = """
## Purchase Document API

Creates purchase orders and delivery notes, and maintains the master and
reference data they depend on.

### Error Codes

| Code | Description |
|------|-------------|
| 400 | Bad Request - Invalid input or delivery date outside the accepted window |
| 403 | Forbidden - Recipient or vendor does not exist |
| 404 | Not Found - Resource doesn't exist |
| 409 | Conflict - Duplicate resource or no free document number |
| 422 | Unprocessable Entity - Invalid unit / tax code or unresolvable order item |
| 500 | Internal Server Error |

Business errors have the body `{"error": <code>, "detail": <message>, "details": {...}}`.

### Support

- **API Docs**: /docs (Swagger UI)
- **ReDoc**: /redoc (Alternative docs)
- **Health Check**: /health
"""

# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=FULL_API_DESCRIPTION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=OPENAPI_TAGS,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


@app.exception_handler(DocumentError)
async def document_error_handler(request: Request, exc: DocumentError):
    """Render business errors with their error code and details."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


# Global exception handler; tracebacks stay in the server log
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "detail": "Internal server error",
        },
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint with database validation."""
    from sqlalchemy import text
    from datetime import datetime, timezone

    health_status = {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "checks": {
            "database": "unknown"
        }
    }

    # Check database connectivity
    try:
        async with async_session_factory() as session:
            result = await session.execute(text("SELECT 1"))
            result.scalar()
            health_status["checks"]["database"] = "connected"
    except Exception as e:
        logger.warning(f"Health check database error: {e}")
        health_status["status"] = "unhealthy"
        health_status["checks"]["database"] = "error"

    # Return 503 if unhealthy
    if health_status["status"] == "unhealthy":
        return JSONResponse(status_code=503, content=health_status)

    return health_status


@app.get("/", tags=["Root"])
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "redoc": "/redoc",
    }
