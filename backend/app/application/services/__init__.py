from .background_service import BackgroundService

__all__ = [
    "BackgroundService",
]
