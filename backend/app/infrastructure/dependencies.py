"""FastAPI dependency injection — wires infrastructure to application layer."""

import logging
from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.application.interfaces import AssetStore
from app.application.services import BackgroundService
from app.infrastructure.database.session import get_db_session
from app.infrastructure.database.repositories import SQLAlchemyBackgroundRepository
from app.infrastructure.storage import CloudinaryAssetStore, LocalAssetStore

logger = logging.getLogger(__name__)


def build_asset_store(settings: Settings) -> AssetStore:
    """Construct the asset store selected by ``asset_store_backend``."""
    backend = settings.asset_store_backend.strip().lower()
    if backend == "local":
        return LocalAssetStore(
            upload_dir=settings.upload_dir,
            public_base_url=settings.public_base_url,
        )
    if backend == "cloudinary":
        return CloudinaryAssetStore(
            cloud_name=settings.cloudinary_cloud_name.strip(),
            api_key=settings.cloudinary_api_key.strip(),
            api_secret=settings.cloudinary_api_secret.strip(),
            folder=settings.cloudinary_folder,
            api_base=settings.cloudinary_api_base,
            timeout=settings.asset_store_timeout_seconds,
        )
    raise ValueError(f"Unknown asset_store_backend: {settings.asset_store_backend!r}")


@lru_cache
def get_asset_store() -> AssetStore:
    """Process-wide asset store, configured once from settings."""
    store = build_asset_store(get_settings())
    logger.info("Asset store configured: %s", store.provider_name)
    return store


async def get_background_service(
    session: AsyncSession = Depends(get_db_session),
    asset_store: AssetStore = Depends(get_asset_store),
) -> AsyncGenerator[BackgroundService, None]:
    """Provides a BackgroundService with its repository and asset store wired up."""
    repository = SQLAlchemyBackgroundRepository(session)
    yield BackgroundService(repository, asset_store)
