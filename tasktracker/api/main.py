"""
Task Tracker HTTP application.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..core.config import API_TITLE, VERSION, debug_enabled, get_cors_origins, validate_config
from ..core.validation import RecordValidationError
from ..util.logging import logger
from .schemas import ErrorResponse
from .tasks import router as tasks_router

for issue in validate_config():
    logger.warning(f"Configuration issue: {issue}")

# Initialize the FastAPI application
app = FastAPI(
    title=API_TITLE,
    version=VERSION,
    description="In-memory task tracker built on a generic resource engine",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(tasks_router, prefix="/tasks", tags=["tasks"])


@app.exception_handler(RecordValidationError)
async def record_validation_exception_handler(request: Request, exc: RecordValidationError):
    """Field-level validation failures are the caller's to fix."""
    content = ErrorResponse(error="Validation failed", details=exc.errors)
    return JSONResponse(status_code=400, content=content.model_dump(exclude_none=True))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies and missing query parameters."""
    details = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body") or "body"
        details[location] = error.get("msg", "Invalid request")
    content = ErrorResponse(error="Validation failed", details=details)
    return JSONResponse(status_code=400, content=content.model_dump(exclude_none=True))


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions."""
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {type(exc).__name__}: {exc}")
    content = ErrorResponse(error="Internal server error", message=str(exc))
    return JSONResponse(status_code=500, content=content.model_dump(exclude_none=True))
