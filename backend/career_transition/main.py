from contextlib import asynccontextmanager
import logging
import time
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from career_transition.api.routes import agents, auth, intake, meta, plans, progress
from career_transition.core.config import settings
from career_transition.core.database import engine
from career_transition.core.errors import register_exception_handlers
from career_transition.core.logging import configure_logging

configure_logging()
logger = logging.getLogger("career_transition.http")


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info("Starting %s %s", settings.app_name, settings.app_version)
    try:
        yield
    finally:
        engine.dispose()
        logger.info("Shutdown complete")


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)

origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=[
        "Content-Type",
        "Authorization",
        "X-Request-Id",
    ],
)

register_exception_handlers(app)


@app.middleware("http")
async def add_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-Id") or uuid4().hex
    started = time.perf_counter()
    response = await call_next(request)
    response.headers["X-Request-Id"] = request_id
    logger.info(
        "%s %s -> %s",
        request.method,
        request.url.path,
        response.status_code,
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 2),
        },
    )
    return response


@app.get("/health", tags=["meta"])
def health():
    return {"status": "ok", "service": settings.app_name}


app.include_router(auth.router, tags=["auth"], prefix="/api")
app.include_router(intake.router, tags=["intake"], prefix="/api")
app.include_router(plans.router, tags=["plans"], prefix="/api")
app.include_router(agents.router, tags=["agents"], prefix="/api")
app.include_router(progress.router, tags=["progress"], prefix="/api")
app.include_router(meta.router, tags=["meta"], prefix="/api")
