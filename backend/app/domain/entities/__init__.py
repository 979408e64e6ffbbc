from .background import AssetUpload, Background, BackgroundType, StoredAsset

__all__ = [
    "AssetUpload",
    "Background",
    "BackgroundType",
    "StoredAsset",
]
