from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from formflow.core.config import settings
from formflow.core.exceptions import FormFlowError, InternalError, ValidationError, error_response
from formflow.core.logging_config import logger
from formflow.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from formflow.api.router import api_router
from formflow.api.endpoints import health
from formflow.storage.factory import create_storage

PLACEHOLDER_SECRETS = {"", "CHANGE_ME", "change-me", "your-secret-key"}


def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []
    warnings = []

    if settings.JWT_SECRET_KEY in PLACEHOLDER_SECRETS:
        errors.append("JWT_SECRET_KEY is not set or using a placeholder value")

    if not settings.use_document_store and not settings.DATABASE_URL:
        errors.append("Neither MONGODB_URI nor DATABASE_URL is set")

    if not (settings.SMTP_USER and settings.SMTP_PASSWORD):
        warnings.append("SMTP credentials not set - verification and OTP emails will not be sent")

    if not settings.ADMIN_PASSWORD:
        warnings.append("ADMIN_PASSWORD not set - admin console login disabled")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    for warn in warnings:
        logger.warning(f"[Startup] WARNING: {warn}")

    logger.info("[Startup] ✓ Critical configuration validated")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info("=" * 60)

    validate_critical_config()

    storage = create_storage(settings)
    await storage.connect()
    app.state.storage = storage

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await storage.close()


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description="Form builder: design forms, collect public submissions, analyze responses",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
    redirect_slashes=False
)

# Add middleware (order matters - last added runs first)
# 1. Request logging (runs first for all requests)
app.add_middleware(RequestLoggingMiddleware)

# 2. Security headers
app.add_middleware(SecurityHeadersMiddleware)

# 3. Request size limit (profile photos are sent inline)
app.add_middleware(RequestSizeLimitMiddleware, max_size=10 * 1024 * 1024)

# 4. CORS - Origins from CORS_ORIGINS_STR in .env
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


# Exception handlers
@app.exception_handler(FormFlowError)
async def formflow_exception_handler(request: Request, exc: FormFlowError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    problems = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    first = problems[0] if problems else {"field": None, "message": "Invalid request"}
    error = ValidationError(first["message"], field=first["field"] or None)
    error.details["errors"] = problems
    return JSONResponse(status_code=400, content=error_response(error))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    error = InternalError(str(exc) if settings.DEBUG else "An error occurred")
    return JSONResponse(status_code=500, content=error_response(error))


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


app.include_router(health.router)
app.include_router(api_router, prefix="/api")


def run():
    """Console entry point: serve the API with uvicorn"""
    import uvicorn
    uvicorn.run(
        "formflow.main:app",
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=settings.DEBUG
    )


if __name__ == "__main__":
    run()
