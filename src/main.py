from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.api import api_router
from core.config import configs
from core.logger import setup_logging
from geometa.metadata.exiftool import ExifTool
from geometa.metadata.extractor import MetadataExtractor

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🔧 Initializing ExifTool...")
    exiftool = ExifTool(configs.EXIFTOOL_PATH, timeout=configs.EXIFTOOL_TIMEOUT_SECONDS)
    status = exiftool.initialize()
    app.state.extractor = MetadataExtractor(exiftool)
    if status.ready:
        logger.info("✅ Metadata extractor initialized.")
    else:
        logger.error(f"❌ Uploads will be rejected until ExifTool is installed: {status.reason}")
    yield
    # Shutdown
    logger.info("🛑 Shutting down metadata worker...")

app = FastAPI(
    title=configs.PROJECT_NAME,
    description="Image & PDF metadata extraction",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS (Allow all for development env)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"💥 Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error", "message": str(exc)})


@app.get("/")
async def root():
    return {"message": "GeoMetaLens Backend is running"}

@app.get("/health")
async def health_check(request: Request):
    extractor = getattr(request.app.state, "extractor", None)
    return {"status": "ok", "exiftool": bool(extractor and extractor.exiftool.status.ready)}
