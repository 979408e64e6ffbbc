"""Abstract repository interface (port) for Background persistence."""

from abc import ABC, abstractmethod

from app.domain.entities import Background


class BackgroundRepository(ABC):
    """Port for background record persistence — implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, background_id: str) -> Background | None:
        """Retrieve a single background by its UUID."""
        ...

    @abstractmethod
    async def get_all(self) -> list[Background]:
        """Retrieve every background in creation order."""
        ...

    @abstractmethod
    async def create(self, background: Background) -> Background:
        """Persist a new background and return it."""
        ...

    @abstractmethod
    async def replace(self, background: Background) -> Background | None:
        """Overwrite the stored row with the same id. Returns None if it no longer exists."""
        ...

    @abstractmethod
    async def delete(self, background_id: str) -> Background | None:
        """Delete a background and return what was removed, or None if not found."""
        ...

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable. Called before assets they release are deleted."""
        ...
