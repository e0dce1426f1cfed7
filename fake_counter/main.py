"""FastAPI application entrypoint."""
from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog import EXCEPTIONS
from .config import get_settings
from .engine import describe_errors
from .models import ServiceError, format_error
from .routers.r5 import inaccurate_report_list_router, nth2_auth_exception_router
from .routers.r5 import router as r5_router
from .utils.logging import bind_request_context, configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger("fake_counter")

app = FastAPI(
    title="Fake COUNTER endpoint",
    description="Fake COUNTER 5 SUSHI endpoint serving randomly generated reports.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.cors_origins == "*" else settings.cors_origins,
    allow_methods=["GET"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    logger.warning(
        "service error",
        extra={**bind_request_context(request), "status_code": exc.status_code, "error_code": exc.code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=format_error(exc.entry, exc.data),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    entry = EXCEPTIONS["not_enough_information"]
    data = describe_errors(exc)
    logger.warning("invalid request", extra={**bind_request_context(request), "status_code": entry.status})
    return JSONResponse(status_code=entry.status, content=format_error(entry, data))


@app.exception_handler(Exception)
async def default_exception_handler(request: Request, exc: Exception):  # pragma: no cover - fallback
    logger.exception("uncaught exception", extra=bind_request_context(request))
    entry = EXCEPTIONS["not_available"]
    return JSONResponse(
        status_code=entry.status,
        content=format_error(entry, "Unexpected error. See logs of application for more details."),
    )


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request.state.request_id = str(uuid.uuid4())
    context = bind_request_context(request)
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:  # pragma: no cover - handled by exception handler
        context["duration_ms"] = round((time.perf_counter() - start) * 1000, 2)
        logger.exception("unhandled error", extra=context)
        raise
    context["status_code"] = response.status_code
    context["duration_ms"] = round((time.perf_counter() - start) * 1000, 2)
    logger.info("request", extra=context)
    return response


@app.get("/healthz", tags=["meta"])
async def health() -> dict[str, bool]:
    return {"ok": True}


app.include_router(r5_router, prefix="/r5")
app.include_router(nth2_auth_exception_router, prefix="/r5/_nth2-auth-exception")
app.include_router(inaccurate_report_list_router, prefix="/r5/_inaccurate-report-list")
