"""Domain entities for background media records and their binary assets."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4


class BackgroundType(str, Enum):
    """Kind of background rendered behind the clock page."""

    VIDEO = "video"
    IMAGE = "image"
    GRADIENT = "gradient"
    SOLID = "solid"

    @property
    def requires_primary_asset(self) -> bool:
        return self in (BackgroundType.VIDEO, BackgroundType.IMAGE)

    @property
    def requires_thumbnail(self) -> bool:
        return self is BackgroundType.VIDEO


@dataclass
class AssetUpload:
    """A binary received from the caller, not yet stored anywhere."""

    content: bytes
    filename: str
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class StoredAsset:
    """Result of an asset store upload: public URL plus the deletion handle."""

    url: str
    handle: str


@dataclass
class Background:
    """Core domain entity for a themeable page background.

    ``primary_asset_handle`` / ``thumbnail_asset_handle`` are only ever set
    from an asset store upload. A URL supplied directly by a client has no
    handle and is never deleted from the asset store.
    """

    name: str
    type: BackgroundType
    id: str = field(default_factory=lambda: str(uuid4()))
    primary_asset_url: str | None = None
    primary_asset_handle: str | None = None
    thumbnail_asset_url: str | None = None
    thumbnail_asset_handle: str | None = None
    style: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def attach_primary(self, asset: StoredAsset) -> None:
        self.primary_asset_url = asset.url
        self.primary_asset_handle = asset.handle

    def attach_thumbnail(self, asset: StoredAsset) -> None:
        self.thumbnail_asset_url = asset.url
        self.thumbnail_asset_handle = asset.handle

    def asset_handles(self) -> list[str]:
        """Handles of every uploaded asset this record owns (primary first)."""
        return [
            handle
            for handle in (self.primary_asset_handle, self.thumbnail_asset_handle)
            if handle
        ]

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)
