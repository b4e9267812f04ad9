"""
Stock Website Backend — FastAPI Application Entry Point

Aggregates all routers, configures CORS and request logging, maps validation
errors to 400 responses and initializes the database on startup.
"""
import time
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from formpay.config import get_settings
from formpay.database import init_db
from formpay.logging_config import configure_logging, get_logger
from formpay.routes import payment_router, brochure_router, contact_router, forms_router

settings = get_settings()
configure_logging(settings.LOG_LEVEL, settings.LOG_JSON)
logger = get_logger("app")

BOOT_TIME = time.time()


# ─── Startup ─────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and log boot info."""
    init_db()
    gateway = settings.gateway()
    logger.info(
        "startup",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        payu_url=gateway.url,
        payu_key="[OK] Loaded" if gateway.key else "[!] Missing",
        email="[OK] Loaded" if settings.EMAIL_USER else "[!] Missing",
        debug=settings.DEBUG,
    )
    yield


# ─── Application Instance ───────────────────────────────────────────
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description=(
        "Lead capture (brochure, contact, generic forms) and PayU payment "
        "sessions with signed callback verification."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# ─── Middleware ──────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every API request with timing."""
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 1)

    if request.url.path.startswith("/api"):
        logger.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration,
            origin=request.headers.get("origin"),
        )

    return response


# ─── Error Handlers ─────────────────────────────────────────────────
@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Field-level 400 instead of FastAPI's default 422."""
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        errors.append({
            "field": ".".join(loc) or "body",
            "message": str(err.get("msg", "Invalid value")).removeprefix("Value error, "),
        })
    logger.info("validation_failed", path=request.url.path, fields=[e["field"] for e in errors])
    return JSONResponse(status_code=400, content={"success": False, "errors": errors})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("unhandled_error", path=request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


# ─── API Routers ─────────────────────────────────────────────────────
app.include_router(payment_router)
app.include_router(brochure_router)
app.include_router(contact_router)
app.include_router(forms_router)


@app.get("/", tags=["Health"])
def root():
    """Service banner with the endpoint map."""
    return {
        "status": "success",
        "message": settings.APP_NAME,
        "endpoints": {
            "test": "/test",
            "health": "/health",
            "brochure": "/api/brochure",
            "payment": "/api/payment",
            "contact": "/api/contact",
            "forms": "/api/forms",
        },
    }


@app.get("/test", tags=["Health"])
def test_route():
    return {
        "status": "success",
        "message": "Server is working properly!",
        "timestamp": datetime.utcnow().isoformat(),
    }


@app.get("/health", tags=["Health"])
def deep_health():
    """Detailed health check including database status."""
    from formpay.database import SessionLocal
    from sqlalchemy import text
    from sqlalchemy.exc import SQLAlchemyError

    db_ok = False
    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError:
        logger.exception("health_db_check_failed")
    finally:
        db.close()

    return {
        "status": "healthy" if db_ok else "degraded",
        "database": "connected" if db_ok else "disconnected",
        "environment": "production" if settings.is_production else "test",
        "uptime_seconds": round(time.time() - BOOT_TIME, 1),
        "version": settings.APP_VERSION,
    }
