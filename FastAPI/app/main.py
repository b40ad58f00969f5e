import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

from app.config import settings
from app.core.errors import LifecycleError
from app.core.rate_limiter import rate_limiter
from app.database import init_db, engine
from app.logging_config import setup_logging
from app.routers import matches, pipeline, profile, system

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(
    title="JobInbox API",
    description="Job matches, application drafts, and the approve/skip workflow.",
    version="1.0.0",
)

cors_origins = [o.strip() for o in settings.cors_allow_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(matches.router)
app.include_router(pipeline.router)
app.include_router(profile.router)
app.include_router(system.router)

MUTATION_PATHS = {"/approve", "/skip"}


@app.exception_handler(LifecycleError)
async def lifecycle_error_handler(request: Request, exc: LifecycleError):
    if exc.status_code >= 500:
        logger.warning("%s on %s %s: %s", exc.code, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def _caller_key(request: Request) -> str:
    auth = request.headers.get("authorization") or ""
    if auth:
        # Last 16 chars of the bearer token identify the caller.
        return f"tok:{auth[-16:]}"
    return f"ip:{request.client.host if request.client else 'unknown'}"


@app.middleware("http")
async def apply_rate_limits(request, call_next):
    path = request.url.path
    if request.method == "OPTIONS":
        return await call_next(request)

    limit = None
    window = 60
    if path == "/pipeline/run":
        limit = settings.rate_limit_pipeline_per_min
    elif path in MUTATION_PATHS or (request.method == "PUT" and path.endswith("/draft")):
        limit = settings.rate_limit_mutation_per_min

    if limit is not None and limit > 0:
        key = f"{_caller_key(request)}:{path}"
        allowed, retry_after = rate_limiter.allow(key, limit=limit, window_seconds=window)
        if not allowed:
            return JSONResponse(
                status_code=429,
                content={"detail": "Too many requests. Please retry shortly."},
                headers={"Retry-After": str(retry_after)},
            )

    return await call_next(request)


@app.get("/health/live")
def health_live():
    return {"status": "ok"}


@app.get("/health/ready")
def health_ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"status": "ready"}
    except Exception:
        logger.exception("Readiness check failed")
        return JSONResponse(status_code=503, content={"status": "not_ready"})


@app.on_event("startup")
def on_startup():
    logger.info("Starting JobInbox API")
    env = (settings.app_env or "development").lower()
    if env in {"production", "prod"}:
        if settings.secret_key == "replace-with-a-long-random-secret-key":
            raise RuntimeError("SECRET_KEY placeholder is not allowed in production")
        if not settings.pipeline_trigger_url:
            raise RuntimeError("PIPELINE_TRIGGER_URL must be set in production")
    else:
        if settings.secret_key == "replace-with-a-long-random-secret-key":
            logger.warning("SECRET_KEY is using placeholder default. Set SECRET_KEY in .env for secure deployments.")
        if not settings.pipeline_trigger_url:
            logger.warning("PIPELINE_TRIGGER_URL is not set; POST /pipeline/run will report the pipeline as unavailable.")
    init_db()


@app.get("/")
def root():
    return {"message": "JobInbox API. GET /inbox for actionable job matches."}
