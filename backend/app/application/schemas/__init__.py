from .background import (
    BackgroundCreate,
    BackgroundUpdate,
    BackgroundResponse,
    BackgroundDeleteResponse,
)

__all__ = [
    "BackgroundCreate",
    "BackgroundUpdate",
    "BackgroundResponse",
    "BackgroundDeleteResponse",
]
