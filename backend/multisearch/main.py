import os

from fastapi import FastAPI, Request, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.logging import configure_logging, get_logger, get_trace_id
from .core.middleware import TraceIDMiddleware
from .routes import health, search, translate, metrics
from .services.search.dictionaries import get_term_dictionaries

configure_logging(
    log_level=os.getenv("LOG_LEVEL", "INFO"),
    json_output=os.getenv("LOG_JSON", "true").lower() == "true",
    http_client_level=os.getenv("LOG_HTTP_CLIENT_LEVEL", "WARNING"),
)

logger = get_logger(__name__)

app = FastAPI(
    title="Multisearch API",
    description="Multilingual search-term processing, translation and suggestions",
    version="1.0.0"
)

cors_origins = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["X-Trace-ID", "X-Request-ID"],
)

# Must be added after CORS middleware
app.add_middleware(TraceIDMiddleware)


@app.on_event("startup")
async def startup_event():
    """Load the term dictionaries before the first request."""
    dictionaries = get_term_dictionaries()
    if dictionaries.initialize():
        logger.info("app_startup_dictionaries_ready", path=str(dictionaries.dictionary_dir))
    else:
        logger.warning(
            "app_startup_dictionaries_incomplete",
            path=str(dictionaries.dictionary_dir),
            message="Search falls back to translation for unmapped terms.",
        )


def _error_response(request: Request, status_code: int, detail) -> JSONResponse:
    # Unhandled errors reach us after the middleware has cleared the log context
    trace_id = getattr(request.state, "trace_id", None) or get_trace_id()
    response = JSONResponse(
        status_code=status_code,
        content={"detail": detail, "status_code": status_code, "trace_id": trace_id},
    )
    if trace_id:
        response.headers["X-Trace-ID"] = trace_id
    return response


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    logger.warning(
        "http_exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method,
    )
    return _error_response(request, exc.status_code, exc.detail)


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
        method=request.method,
        exc_info=True,
    )
    return _error_response(request, 500, "Internal server error")


app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(search.router, prefix="/search", tags=["Search"])
app.include_router(translate.router, prefix="/translate", tags=["Translation"])
app.include_router(metrics.router, prefix="/metrics", tags=["Metrics"])
