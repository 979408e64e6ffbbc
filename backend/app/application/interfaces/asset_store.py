"""Abstract interface (port) for the remote binary asset host."""

from abc import ABC, abstractmethod

from app.domain.entities import AssetUpload, StoredAsset


class AssetStore(ABC):
    """Port for storing and deleting background media binaries.

    Uploads and deletions are deliberately asymmetric: ``upload`` raises
    ``UploadError`` on any failure, while ``delete`` never raises and only
    reports whether the host confirmed the deletion.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short identifier used in logs and errors (e.g. 'cloudinary')."""
        ...

    @abstractmethod
    async def upload(self, asset: AssetUpload) -> StoredAsset:
        """Store the binary and return its public URL and deletion handle.

        Raises:
            UploadError: The host is unreachable or rejected the content.
        """
        ...

    @abstractmethod
    async def delete(self, handle: str) -> bool:
        """Best-effort deletion by handle. Returns False (and logs) on failure."""
        ...
