"""Pydantic DTOs (Data Transfer Objects) for the Background feature."""

from datetime import datetime

from pydantic import BaseModel, Field

from app.domain.entities import BackgroundType


class BackgroundCreate(BaseModel):
    """Schema for creating a new background.

    ``name`` and ``type`` are checked by the service so that every caller,
    not only the HTTP layer, gets the same validation.
    """

    name: str = Field(..., max_length=200, examples=["Rain"])
    type: str = Field(..., examples=["gradient"])
    style: str | None = Field(None, max_length=500, examples=["bg-blue-900"])
    primary_asset_url: str | None = Field(None, max_length=2048)
    thumbnail_asset_url: str | None = Field(None, max_length=2048)


class BackgroundUpdate(BaseModel):
    """Schema for updating an existing background — all fields optional.

    Only fields explicitly provided are applied; omitted fields keep their
    stored value.
    """

    name: str | None = Field(None, max_length=200)
    type: str | None = None
    style: str | None = Field(None, max_length=500)
    primary_asset_url: str | None = Field(None, max_length=2048)
    thumbnail_asset_url: str | None = Field(None, max_length=2048)


class BackgroundResponse(BaseModel):
    """Schema returned to the client. Asset handles stay server-side.

    Serialized with the field names the background selector reads:
    ``_id``, ``src`` and ``thumbnail``.
    """

    id: str = Field(..., serialization_alias="_id")
    name: str
    type: BackgroundType
    primary_asset_url: str | None = Field(None, serialization_alias="src")
    thumbnail_asset_url: str | None = Field(None, serialization_alias="thumbnail")
    style: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class BackgroundDeleteResponse(BaseModel):
    """Confirmation returned after a background has been removed."""

    deleted: bool
    message: str
