"""Cloudinary asset store — implements the AssetStore interface.

Talks to the Cloudinary Upload API (https://api.cloudinary.com/v1_1)
with httpx, using signed requests:

    upload:   POST /{cloud_name}/auto/upload        (multipart, resource type auto-detected)
    destroy:  POST /{cloud_name}/{resource_type}/destroy

Handles have the form ``<resource_type>/<public_id>`` so that videos are
destroyed through the video endpoint. A bare public id is treated as an image.
"""

import hashlib
import logging
import time
from typing import Any

import httpx

from app.application.interfaces.asset_store import AssetStore
from app.domain.entities import AssetUpload, StoredAsset
from app.domain.exceptions import UploadError

logger = logging.getLogger(__name__)

_RESOURCE_TYPES = frozenset({"image", "video", "raw"})


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """Compute the Cloudinary request signature.

    SHA-1 of the alphabetically sorted ``key=value`` pairs joined by ``&``,
    with the API secret appended. Empty values are skipped.
    """
    to_sign = "&".join(
        f"{key}={params[key]}" for key in sorted(params) if params[key] not in (None, "")
    )
    return hashlib.sha1(f"{to_sign}{api_secret}".encode("utf-8")).hexdigest()


def split_handle(handle: str) -> tuple[str, str]:
    """Split a handle into ``(resource_type, public_id)``."""
    prefix, sep, rest = handle.partition("/")
    if sep and prefix in _RESOURCE_TYPES and rest:
        return prefix, rest
    return "image", handle


class CloudinaryAssetStore(AssetStore):
    """Infrastructure adapter — stores background media on Cloudinary."""

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "backgrounds",
        api_base: str = "https://api.cloudinary.com/v1_1",
        timeout: float = 600.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder
        self._base_url = f"{api_base.rstrip('/')}/{cloud_name}"
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "cloudinary"

    @property
    def configured(self) -> bool:
        return bool(self._cloud_name and self._api_key and self._api_secret)

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        """Return ``params`` plus timestamp, api_key and signature."""
        payload = {**params, "timestamp": str(int(time.time()))}
        payload["signature"] = sign_params(payload, self._api_secret)
        payload["api_key"] = self._api_key
        return payload

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def upload(self, asset: AssetUpload) -> StoredAsset:
        if not self.configured:
            raise UploadError(self.provider_name, "credentials are not configured")
        params: dict[str, Any] = {}
        if self._folder:
            params["folder"] = self._folder
        data = self._signed(params)
        files = {
            "file": (
                asset.filename,
                asset.content,
                asset.content_type or "application/octet-stream",
            )
        }

        client = await self._get_client()
        should_close = self._http_client is None
        try:
            response = await client.post(f"{self._base_url}/auto/upload", data=data, files=files)
        except httpx.HTTPError as exc:
            raise UploadError(self.provider_name, f"request failed: {exc}") from exc
        finally:
            if should_close:
                await client.aclose()

        if response.status_code != 200:
            raise UploadError(
                self.provider_name, self._error_message(response), response.status_code
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise UploadError(self.provider_name, "response is not valid JSON") from exc
        if not isinstance(body, dict):
            raise UploadError(self.provider_name, "response is not a JSON object")
        url = body.get("secure_url") or body.get("url")
        public_id = body.get("public_id")
        if not url or not public_id:
            raise UploadError(self.provider_name, "response is missing secure_url or public_id")

        resource_type = body.get("resource_type") or "image"
        logger.info(
            "Uploaded %s to Cloudinary: %s (%s, %d bytes)",
            asset.filename, public_id, resource_type, asset.size,
        )
        return StoredAsset(url=url, handle=f"{resource_type}/{public_id}")

    async def delete(self, handle: str) -> bool:
        if not self.configured:
            logger.error("Cannot delete Cloudinary asset %s: credentials are not configured", handle)
            return False
        resource_type, public_id = split_handle(handle)
        data = self._signed({"public_id": public_id, "invalidate": "true"})

        client = await self._get_client()
        should_close = self._http_client is None
        try:
            response = await client.post(f"{self._base_url}/{resource_type}/destroy", data=data)
        except httpx.HTTPError as exc:
            logger.error("Failed to delete Cloudinary asset %s: %s", handle, exc)
            return False
        finally:
            if should_close:
                await client.aclose()

        if response.status_code != 200:
            logger.error(
                "Failed to delete Cloudinary asset %s: %s %s",
                handle, response.status_code, self._error_message(response),
            )
            return False

        try:
            body = response.json()
        except ValueError:
            body = None
        result = body.get("result") if isinstance(body, dict) else None
        if result != "ok":
            logger.warning("Cloudinary did not delete asset %s: result=%s", handle, result)
            return False

        logger.info("Deleted Cloudinary asset %s", handle)
        return True

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the error message from a Cloudinary error response."""
        try:
            body = response.json()
        except ValueError:
            return response.text or "unknown error"
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return str(error.get("message", error))
        return str(error or body)
