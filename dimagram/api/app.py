"""FastAPI app, CORS, request logging, and route registration."""
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s: %(name)s: %(message)s",
)

from dimagram.api.state import AppState, get_state
from dimagram.config import CORS_ORIGINS, FRONTEND_DIR, ensure_data_dir

# Import routes after state to avoid circular imports
from dimagram.api.routes import album, publish, upload

__all__ = ["app", "AppState", "get_state"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    ensure_data_dir()
    logger.info("Data directory ready: %s", get_state().store.data_dir)
    yield


app = FastAPI(
    title="Dimagram API",
    description="Album queue, daily publish and media upload",
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.monotonic()
    response = await call_next(request)
    logger.info(
        "%s %s in %.1fms",
        request.method,
        request.url.path,
        (time.monotonic() - start) * 1000,
    )
    return response


app.include_router(album.router, prefix="/api", tags=["album"])
app.include_router(publish.router, prefix="/api", tags=["publish"])
app.include_router(upload.router, prefix="/api", tags=["upload"])

# Frontend build (album editor), when present
if FRONTEND_DIR.is_dir():
    app.mount("/", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")
