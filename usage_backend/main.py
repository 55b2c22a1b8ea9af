"""FastAPI application entry point."""
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
import logging
from logging.handlers import RotatingFileHandler
from contextlib import asynccontextmanager

from usage_backend.config import get_settings
from usage_backend.version import APP_VERSION
from usage_backend.routers import activity, dashboard, health, stats, users
from usage_backend.storage import JsonFileRecordStore
from usage_backend.utils.exceptions import PersistenceError

settings = get_settings()

# Create logs directory if it doesn't exist
logs_dir = settings.log_dir
logs_dir.mkdir(parents=True, exist_ok=True)

log_file = logs_dir / "usage_backend.log"
api_log_file = logs_dir / "usage_backend_api.log"

# Create rotating file handler for general logs (1MB max size, keep 5 backup files)
rotating_handler = RotatingFileHandler(
    log_file,
    maxBytes=1024 * 1024,
    backupCount=5,
    encoding='utf-8',
)
rotating_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))

# Create rotating file handler for API request logs (2MB max size, keep 15 backup files)
api_rotating_handler = RotatingFileHandler(api_log_file, maxBytes=2 * 1024 * 1024, backupCount=15, encoding='utf-8')
api_rotating_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))

# Force=True ensures we override any existing configuration (e.g., from uvicorn)
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
        rotating_handler,
    ],
    force=True,
)

logger = logging.getLogger(__name__)

# Dedicated API request logger
api_logger = logging.getLogger("usage_backend.api")
api_logger.handlers.clear()
api_logger.addHandler(api_rotating_handler)
api_logger.setLevel(logging.INFO)
api_logger.propagate = False

# Configure Uvicorn's access logger to also write to our rotating log file
uvicorn_access_logger = logging.getLogger("uvicorn.access")
uvicorn_access_logger.setLevel(logging.INFO)
if rotating_handler not in uvicorn_access_logger.handlers:
    uvicorn_access_logger.addHandler(rotating_handler)


@asynccontextmanager
async def lifespan(app_instance: FastAPI):
    """Create the record store and prepare storage before serving requests."""
    current_settings = get_settings()
    logger.info("=" * 60)
    logger.info("Usage Backend Starting")
    logger.info(f"Environment: {current_settings.environment}")
    logger.info(f"Storage: {current_settings.storage_dir.resolve()}")
    logger.info(f"Activity retention limit: {current_settings.activity_retention_limit}")
    logger.info("=" * 60)

    store = JsonFileRecordStore(current_settings.storage_dir)
    try:
        await store.initialize()
    except PersistenceError as e:
        logger.error(f"Failed to initialize storage: {e}")
    app_instance.state.record_store = store

    try:
        yield
    finally:
        logger.info("Usage Backend Shutting Down... Goodbye!")


# Create FastAPI app
app = FastAPI(
    title="Usage Backend API",
    description="User registrations, activity events and admin stats",
    version=APP_VERSION,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Answer malformed payloads with 400 and a readable error list."""
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

    errors = []
    for error in exc.errors():
        loc = error.get("loc", [])
        field_path = " -> ".join(str(x) for x in loc[1:]) if len(loc) > 1 else "body"
        errors.append({
            "field": field_path,
            "message": error.get("msg", "Validation error"),
            "type": error.get("type", "unknown"),
        })

    return JSONResponse(
        status_code=400,
        content={
            "detail": "Request validation failed",
            "errors": errors
        }
    )


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request and its outcome to the dedicated API log."""
    start_time = time.time()

    client_ip = request.client.host if request.client else "unknown"
    method = request.method
    path = request.url.path
    request_id = f"{method}:{path}:{int(start_time * 1000) % 100000}"

    api_logger.info(f">> {request_id} | START | {method} {path} | IP: {client_ip}")

    try:
        response = await call_next(request)
    except Exception as e:
        api_logger.error(
            f"<< {request_id} | EXCEPTION | {method} {path} | "
            f"Error: {str(e)[:100]} | "
            f"Time: {time.time() - start_time:.3f}s"
        )
        raise

    api_logger.info(
        f"<< {request_id} | COMPLETE | {method} {path} | "
        f"Status: {response.status_code} | "
        f"Time: {time.time() - start_time:.3f}s"
    )
    return response


cors_origins = settings.cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(users.router)
app.include_router(activity.router)
app.include_router(stats.router)
app.include_router(dashboard.router)
app.include_router(health.router)

if settings.static_dir.is_dir():
    app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")
    logger.info(f"Serving static files from {settings.static_dir.resolve()}")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Usage Backend API",
        "version": APP_VERSION,
        "environment": settings.environment,
        "dashboard": "/dashboard",
        "docs": "/docs",
    }


def run():
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
