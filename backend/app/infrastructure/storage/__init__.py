from .cloudinary_asset_store import CloudinaryAssetStore
from .local_asset_store import LocalAssetStore

__all__ = [
    "CloudinaryAssetStore",
    "LocalAssetStore",
]
