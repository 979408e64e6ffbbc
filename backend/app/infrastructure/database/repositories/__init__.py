from .background_repository import SQLAlchemyBackgroundRepository

__all__ = [
    "SQLAlchemyBackgroundRepository",
]
