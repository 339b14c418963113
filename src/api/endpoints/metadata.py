import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from core.dependencies import get_metadata_service
from geometa.metadata.exceptions import ExifToolUnavailableError, UploadRejectedError
from geometa.metadata.schema import AnalyzeUrlRequest, UploadResponse
from geometa.metadata.service import MetadataService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/upload", response_model=UploadResponse)
async def upload(
    image: Optional[UploadFile] = File(None),
    service: MetadataService = Depends(get_metadata_service),
):
    """
    Upload an image or PDF and return its normalized metadata.
    """
    if image is None:
        raise HTTPException(status_code=400, detail="No file uploaded. Please select an image file to upload")

    filename = image.filename or "upload"

    try:
        # Reject on the spooled size before pulling the body into memory
        if image.size is not None:
            service.validate_upload(filename, image.size)
        data = await image.read()
        return await service.process_upload(data, filename, image.content_type)
    except UploadRejectedError as e:
        logger.warning(f"⚠️ Rejected upload {filename}: {e}")
        raise HTTPException(status_code=e.status_code, detail=str(e))
    except ExifToolUnavailableError as e:
        logger.error(f"💥 ExifTool unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.exception(f"💥 Failed to process {filename}: {e}")
        return JSONResponse(status_code=500, content={"error": "Failed to process image", "message": str(e)})


@router.post("/analyze-url")
async def analyze_url(req: Optional[AnalyzeUrlRequest] = None):
    if req is None or not req.image_url:
        raise HTTPException(status_code=400, detail="No URL provided. Please provide an image URL")
    return JSONResponse(
        status_code=501,
        content={"error": "Not implemented", "message": "URL analysis feature coming soon"},
    )


@router.get("/health")
async def upload_health():
    return {
        "status": "OK",
        "service": "Upload Service",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
