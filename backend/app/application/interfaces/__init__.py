from .asset_store import AssetStore
from .background_repository import BackgroundRepository

__all__ = [
    "AssetStore",
    "BackgroundRepository",
]
