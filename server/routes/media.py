"""Media endpoints -- inspect, convert and open local files.

Handlers are plain ``def`` so FastAPI runs each blocking ffprobe/ffmpeg call
on its own worker thread.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from converter.service import MediaService
from lib.errors import InvalidRequestError, MediaError, MediaNotFoundError
from lib.models import ConversionRequest, ConversionResult, FormatOption, MediaInfo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/media", tags=["media"])

_service = None  # type: Optional[MediaService]


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class PathRequest(BaseModel):
    path: str = ""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def set_service(service: Optional[MediaService]):
    global _service
    _service = service


def get_service() -> MediaService:
    if _service is None:
        raise HTTPException(status_code=503, detail="FFmpeg is not ready")
    return _service


def _to_http(e: MediaError) -> HTTPException:
    if isinstance(e, InvalidRequestError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, MediaNotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/inspect")
def inspect_media(req: PathRequest, service: MediaService = Depends(get_service)) -> MediaInfo:
    logger.info("POST /api/media/inspect path=%s", req.path)
    try:
        return service.inspect_media(req.path)
    except MediaError as e:
        logger.error("Inspect failed for %s: %s", req.path, e)
        raise _to_http(e) from e


@router.post("/convert")
def convert_media(req: ConversionRequest,
                  service: MediaService = Depends(get_service)) -> ConversionResult:
    logger.info("POST /api/media/convert source=%s format=%s speed=%s",
                req.source_path, req.target_format, req.speed)
    try:
        return service.convert_media(req.source_path, req.target_format, req.speed)
    except MediaError as e:
        logger.error("Convert failed for %s: %s", req.source_path, e)
        raise _to_http(e) from e


@router.post("/open")
def open_path(req: PathRequest, service: MediaService = Depends(get_service)) -> dict:
    logger.info("POST /api/media/open path=%s", req.path)
    try:
        service.open_path(req.path)
    except MediaError as e:
        raise _to_http(e) from e
    return {"status": "opened", "path": req.path}


@router.get("/formats/{kind}")
def list_formats(kind: str, service: MediaService = Depends(get_service)) -> List[FormatOption]:
    try:
        return service.format_options(kind)
    except InvalidRequestError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
