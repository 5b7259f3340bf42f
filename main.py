"""
Map Thumbnail Generator - FastAPI Application
"""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional
from loguru import logger
import sys

from config import settings
from imagegen import (
    Exporter,
    generate_batch_thumbnail,
    generate_card,
    generate_playlist_thumbnail,
    generate_reweight_card,
    generate_video_thumbnail,
    read_image_as_data_url,
)
from utils.exceptions import (
    EncodingError,
    FetchError,
    MalformedInputError,
    SurfaceAllocationError,
    ThumbnailError,
)

# Configure logging
logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)
if settings.LOG_FILE:
    # Create logs directory
    settings.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
    logger.add(settings.LOG_FILE, rotation="500 MB", retention="10 days", level="DEBUG")


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description="Thumbnail and card generator for ranked map batches",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

exporter = Exporter()


# Request/Response Models
class ThumbnailRequest(BaseModel):
    """Request model for batch and playlist thumbnails"""
    background: str = Field(..., description="Background image URL, data URL or local path")
    month: str = Field(..., description="Title text, e.g. 'March 2024'")
    transform: Optional[Dict[str, Any]] = Field(None, description="Optional {scale, x, y} background transform")


class CardRequest(BaseModel):
    """Request model for the map info card"""
    map_info: Dict[str, Any] = Field(..., description="Map description (camelCase catalog JSON)")
    star_ratings: Optional[Dict[str, Optional[str]]] = Field(None, description="Rating per difficulty key")
    use_background: bool = Field(True, description="Draw the blurred cover backdrop")


class ReweightRequest(BaseModel):
    """Request model for the reweight card"""
    map_info: Dict[str, Any]
    old_star_ratings: Optional[Dict[str, Optional[str]]] = None
    new_star_ratings: Optional[Dict[str, Optional[str]]] = None
    chosen_diff: str = Field(..., description="Difficulty key: ES, NOR, HARD, EX or EXP")


class VideoThumbnailRequest(BaseModel):
    """Request model for the video thumbnail"""
    map_info: Dict[str, Any]
    chosen_diff: str
    star_ratings: Optional[Dict[str, Optional[str]]] = None
    background: str = Field(..., description="Background image; the map cover is used if it cannot be fetched")


class ReadImageRequest(BaseModel):
    """Request model for reading a local image"""
    path: str = Field(..., description="Path relative to the output directory")


class SaveImageRequest(BaseModel):
    """Request model for saving a generated image"""
    data: str = Field(..., description="Data URL or bare base64")
    path: str = Field(..., description="Path relative to the output directory")


class ImageResponse(BaseModel):
    """Generated image"""
    data_url: str


class SaveResponse(BaseModel):
    """Saved file location"""
    path: str


class StatusResponse(BaseModel):
    """Status response model"""
    status: str
    message: str


def _to_http_error(e: ThumbnailError) -> HTTPException:
    """Map a generator failure to a single-string HTTP error"""
    if isinstance(e, MalformedInputError):
        status_code = 422
    elif isinstance(e, FetchError):
        status_code = 502
    elif isinstance(e, (EncodingError, SurfaceAllocationError)):
        status_code = 500
    else:
        status_code = 400

    logger.error(f"Request failed ({status_code}): {e}")
    return HTTPException(status_code=status_code, detail=str(e))


# API Endpoints
@app.get("/health", response_model=StatusResponse)
async def health():
    """Health check endpoint"""
    return StatusResponse(
        status="healthy",
        message="All systems operational"
    )


@app.post("/thumbnails/batch", response_model=ImageResponse)
async def batch_thumbnail(request: ThumbnailRequest):
    """Generate the 1920x1080 batch thumbnail"""
    try:
        data_url = await generate_batch_thumbnail(request.background, request.month, request.transform)
    except ThumbnailError as e:
        raise _to_http_error(e) from e
    return ImageResponse(data_url=data_url)


@app.post("/thumbnails/playlist", response_model=ImageResponse)
async def playlist_thumbnail(request: ThumbnailRequest):
    """Generate the 512x512 playlist thumbnail"""
    try:
        data_url = await generate_playlist_thumbnail(request.background, request.month, request.transform)
    except ThumbnailError as e:
        raise _to_http_error(e) from e
    return ImageResponse(data_url=data_url)


@app.post("/thumbnails/video", response_model=ImageResponse)
async def video_thumbnail(request: VideoThumbnailRequest):
    """Generate the 1920x1080 video thumbnail"""
    try:
        data_url = await generate_video_thumbnail(
            request.map_info,
            request.chosen_diff,
            request.star_ratings,
            request.background,
        )
    except ThumbnailError as e:
        raise _to_http_error(e) from e
    return ImageResponse(data_url=data_url)


@app.post("/cards/map", response_model=ImageResponse)
async def map_card(request: CardRequest):
    """Generate the 900x300 map info card"""
    try:
        data_url = await generate_card(request.map_info, request.star_ratings, request.use_background)
    except ThumbnailError as e:
        raise _to_http_error(e) from e
    return ImageResponse(data_url=data_url)


@app.post("/cards/reweight", response_model=ImageResponse)
async def reweight_card(request: ReweightRequest):
    """Generate the 600x270 reweight comparison card"""
    try:
        data_url = await generate_reweight_card(
            request.map_info,
            request.old_star_ratings,
            request.new_star_ratings,
            request.chosen_diff,
        )
    except ThumbnailError as e:
        raise _to_http_error(e) from e
    return ImageResponse(data_url=data_url)


@app.post("/images/read", response_model=ImageResponse)
async def read_image(request: ReadImageRequest):
    """Read an image from the output directory as a data URL"""
    try:
        data_url = read_image_as_data_url(exporter.resolve_path(request.path))
    except ThumbnailError as e:
        raise _to_http_error(e) from e
    return ImageResponse(data_url=data_url)


@app.post("/images/save", response_model=SaveResponse)
async def save_image(request: SaveImageRequest):
    """Save a data URL (or bare base64) under the output directory"""
    try:
        path = exporter.save(request.data, request.path)
    except ThumbnailError as e:
        raise _to_http_error(e) from e
    except OSError as e:
        logger.error(f"Failed to save {request.path}: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to save image: {e}") from e
    return SaveResponse(path=str(path))


# Run with: uvicorn main:app --host 0.0.0.0 --port 8000 --reload
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=True
    )
