# brandswap/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from brandswap.config import get_settings
from brandswap.dependencies import close_services, get_refinement_adapter
from brandswap.logging_config import configure_logging, new_request_id, request_id_var
from brandswap.routers import apply, content, preview, scan, validate

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(json_format=settings.LOG_FORMAT == "json", level=settings.LOG_LEVEL)

    # Fail fast when the refinement provider is misconfigured
    get_refinement_adapter(settings)
    logger.info(
        f"Brandswap API starting (environment={settings.ENVIRONMENT}, "
        f"store={settings.RECORD_STORE_PROVIDER}, refinement={settings.REFINEMENT_PROVIDER})"
    )
    yield
    await close_services()


app = FastAPI(title="Brandswap API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or new_request_id()
    token = request_id_var.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.include_router(content.router)
app.include_router(scan.router)
app.include_router(preview.router)
app.include_router(apply.router)
app.include_router(validate.router)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

@app.get("/health")
def health() -> dict:
    return {"status": "ok", "service": "brandswap-api"}
