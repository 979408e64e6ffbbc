from .background import BackgroundModel

__all__ = [
    "BackgroundModel",
]
