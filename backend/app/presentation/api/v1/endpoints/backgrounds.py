"""Background CRUD endpoints — multipart forms with optional primary/thumbnail files."""

import logging
import mimetypes
import re

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError as SchemaValidationError

from app.application.schemas.background import (
    BackgroundCreate,
    BackgroundDeleteResponse,
    BackgroundResponse,
    BackgroundUpdate,
)
from app.application.services import BackgroundService
from app.config import Settings, get_settings
from app.domain.entities import AssetUpload
from app.domain.exceptions import (
    EntityNotFoundError,
    StorageError,
    UploadError,
    ValidationError,
)
from app.infrastructure.dependencies import get_background_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/background", tags=["Backgrounds"])

_ALLOWED_CONTENT_TYPES = re.compile(
    r"^(image/(jpg|jpeg|png|gif)|video/(mp4|webm|avi|x-msvideo|quicktime))$"
)
_DOMAIN_ERRORS = (ValidationError, EntityNotFoundError, UploadError, StorageError)


# ── Helpers ──────────────────────────────────────────────────────────

def _http_error(exc: Exception) -> HTTPException:
    """Map a domain exception to the HTTP status the API reports for it."""
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    if isinstance(exc, EntityNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, UploadError):
        logger.error("Asset upload failed: %s", exc)
        return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc))
    logger.error("Record store failure: %s", exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Record store failure"
    )


async def _read_upload(
    upload: UploadFile | None, field: str, max_bytes: int
) -> AssetUpload | None:
    """Read an uploaded file part, enforcing the image/video type filter and size limit.

    Missing or empty parts count as "no file".
    """
    if upload is None or not upload.filename:
        return None
    content = await upload.read()
    if not content:
        return None

    content_type = (
        upload.content_type
        if upload.content_type and upload.content_type != "application/octet-stream"
        else mimetypes.guess_type(upload.filename)[0]
    ) or ""
    if not _ALLOWED_CONTENT_TYPES.match(content_type.lower()):
        raise ValidationError(
            f"Only image and video files are allowed ({field}: {content_type or 'unknown type'})",
            field=field,
        )
    if len(content) > max_bytes:
        raise ValidationError(
            f"{field} exceeds the maximum upload size of {max_bytes // (1024 * 1024)} MB",
            field=field,
        )
    return AssetUpload(content=content, filename=upload.filename, content_type=content_type)


def _to_response(background) -> BackgroundResponse:
    return BackgroundResponse.model_validate(background, from_attributes=True)


# ── Endpoints ────────────────────────────────────────────────────────

@router.get("", response_model=list[BackgroundResponse])
async def list_backgrounds(
    service: BackgroundService = Depends(get_background_service),
) -> list[BackgroundResponse]:
    """Retrieve every background in creation order."""
    try:
        backgrounds = await service.list_backgrounds()
    except _DOMAIN_ERRORS as e:
        raise _http_error(e) from e
    return [_to_response(b) for b in backgrounds]


@router.get("/{background_id}", response_model=BackgroundResponse)
async def get_background(
    background_id: str,
    service: BackgroundService = Depends(get_background_service),
) -> BackgroundResponse:
    """Retrieve a single background by ID."""
    try:
        background = await service.get_background(background_id)
    except _DOMAIN_ERRORS as e:
        raise _http_error(e) from e
    return _to_response(background)


@router.post("", response_model=BackgroundResponse, status_code=status.HTTP_201_CREATED)
async def create_background(
    name: str = Form(...),
    background_type: str = Form(..., alias="type"),
    style: str | None = Form(None),
    primary_asset_url: str | None = Form(None),
    thumbnail_asset_url: str | None = Form(None),
    primary: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    service: BackgroundService = Depends(get_background_service),
) -> BackgroundResponse:
    """Create a background. ``video`` needs both files, ``image`` needs ``primary``."""
    try:
        data = BackgroundCreate(
            name=name,
            type=background_type,
            style=style,
            primary_asset_url=primary_asset_url,
            thumbnail_asset_url=thumbnail_asset_url,
        )
    except SchemaValidationError as e:
        raise RequestValidationError(e.errors()) from e

    try:
        primary_asset = await _read_upload(primary, "primary", settings.max_upload_size_bytes)
        thumbnail_asset = await _read_upload(thumbnail, "thumbnail", settings.max_upload_size_bytes)
        background = await service.create_background(data, primary_asset, thumbnail_asset)
    except _DOMAIN_ERRORS as e:
        raise _http_error(e) from e
    return _to_response(background)


@router.put("/{background_id}", response_model=BackgroundResponse)
async def update_background(
    background_id: str,
    name: str | None = Form(None),
    background_type: str | None = Form(None, alias="type"),
    style: str | None = Form(None),
    primary_asset_url: str | None = Form(None),
    thumbnail_asset_url: str | None = Form(None),
    primary: UploadFile | None = File(None),
    thumbnail: UploadFile | None = File(None),
    settings: Settings = Depends(get_settings),
    service: BackgroundService = Depends(get_background_service),
) -> BackgroundResponse:
    """Partially update a background; omitted fields are left untouched."""
    provided = {
        "name": name,
        "type": background_type,
        "style": style,
        "primary_asset_url": primary_asset_url,
        "thumbnail_asset_url": thumbnail_asset_url,
    }
    try:
        data = BackgroundUpdate(**{k: v for k, v in provided.items() if v is not None})
    except SchemaValidationError as e:
        raise RequestValidationError(e.errors()) from e

    try:
        primary_asset = await _read_upload(primary, "primary", settings.max_upload_size_bytes)
        thumbnail_asset = await _read_upload(thumbnail, "thumbnail", settings.max_upload_size_bytes)
        background = await service.update_background(
            background_id, data, primary_asset, thumbnail_asset
        )
    except _DOMAIN_ERRORS as e:
        raise _http_error(e) from e
    return _to_response(background)


@router.delete("/{background_id}", response_model=BackgroundDeleteResponse)
async def delete_background(
    background_id: str,
    service: BackgroundService = Depends(get_background_service),
) -> BackgroundDeleteResponse:
    """Delete a background and every asset it references."""
    try:
        result = await service.remove_background(background_id)
    except _DOMAIN_ERRORS as e:
        raise _http_error(e) from e
    return BackgroundDeleteResponse(**result)
