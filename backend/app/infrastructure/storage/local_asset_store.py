"""Local filesystem asset store for development without a Cloudinary account.

Storage layout:
    <upload_dir>/backgrounds/<stem>_<YYYYMMDD_HHmmss>_<rand>.<ext>

Files are served by the application under ``/uploads`` so the returned URL
is ``<public_base_url>/uploads/backgrounds/<file>``. The handle is the path
relative to ``upload_dir``.
"""

import logging
import re
import secrets
from datetime import datetime, timezone
from pathlib import Path

from app.application.interfaces.asset_store import AssetStore
from app.domain.entities import AssetUpload, StoredAsset
from app.domain.exceptions import UploadError

logger = logging.getLogger(__name__)


def _datetime_stamp() -> str:
    """Return a UTC datetime stamp suitable for filenames: YYYYMMDD_HHmmss."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


class LocalAssetStore(AssetStore):
    """Infrastructure adapter for storing background media on local disk."""

    def __init__(
        self,
        upload_dir: str,
        public_base_url: str = "http://localhost:8000",
        folder: str = "backgrounds",
    ):
        self._upload_dir = Path(upload_dir).resolve()
        self._folder = _sanitise(folder) if folder else "backgrounds"
        self._public_base_url = public_base_url.rstrip("/")
        (self._upload_dir / self._folder).mkdir(parents=True, exist_ok=True)

    @property
    def provider_name(self) -> str:
        return "local"

    async def upload(self, asset: AssetUpload) -> StoredAsset:
        """Write the binary to ``<upload_dir>/<folder>/``.

        The filename gets a UTC stamp and a random suffix so repeated uploads
        of the same file never overwrite each other.
        """
        stem = Path(asset.filename).stem
        suffix = Path(asset.filename).suffix.lower()
        stored_name = f"{_sanitise(stem)}_{_datetime_stamp()}_{secrets.token_hex(4)}{suffix}"
        relative = f"{self._folder}/{stored_name}"
        dest_path = self._upload_dir / relative

        try:
            dest_path.write_bytes(asset.content)
        except OSError as exc:
            raise UploadError(self.provider_name, f"could not write {relative}: {exc}") from exc

        logger.info("Stored asset: %s (%d bytes)", dest_path, asset.size)
        return StoredAsset(url=f"{self._public_base_url}/uploads/{relative}", handle=relative)

    async def delete(self, handle: str) -> bool:
        """Delete a stored asset. Returns False if it is missing or outside the upload dir."""
        file_path = (self._upload_dir / handle).resolve()
        if not file_path.is_relative_to(self._upload_dir):
            logger.warning("Refusing to delete asset outside upload dir: %s", handle)
            return False
        if not file_path.is_file():
            logger.warning("Asset to delete does not exist: %s", handle)
            return False

        try:
            file_path.unlink()
        except OSError as exc:
            logger.error("Failed to delete asset %s: %s", handle, exc)
            return False

        logger.info("Deleted asset from disk: %s", handle)
        return True
