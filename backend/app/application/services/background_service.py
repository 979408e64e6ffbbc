"""Application service (use case) for the background record lifecycle.

Keeps persisted backgrounds consistent with the asset store:

    create:  validate → upload primary → upload thumbnail → persist
    update:  load → merge patch → validate → upload new assets → persist → commit
             → release superseded assets
    remove:  delete-and-fetch → commit → release every asset the record held

Upload failures abort the operation. Asset deletions are best-effort and
never fail a mutation that has otherwise succeeded.
"""

import logging
from typing import Any

from app.application.interfaces import AssetStore, BackgroundRepository
from app.application.schemas.background import BackgroundCreate, BackgroundUpdate
from app.domain.entities import AssetUpload, Background, BackgroundType, StoredAsset
from app.domain.exceptions import EntityNotFoundError, StorageError, UploadError, ValidationError
from app.infrastructure.logging.colored_logger import LifecycleLogger, LifecycleStage

logger = logging.getLogger(__name__)
plog = LifecycleLogger("BackgroundService")

_ENTITY = "Background"


def _validate_name(name: str | None) -> str:
    if name is None or not name.strip():
        raise ValidationError("name must not be empty", field="name")
    return name.strip()


def _parse_type(raw: str | None) -> BackgroundType:
    try:
        return BackgroundType(raw)
    except ValueError:
        allowed = ", ".join(t.value for t in BackgroundType)
        raise ValidationError(
            f"type must be one of: {allowed} (got {raw!r})", field="type"
        ) from None


def _require_assets(
    background_type: BackgroundType, has_primary: bool, has_thumbnail: bool
) -> None:
    """Enforce the per-type asset requirements."""
    if background_type.requires_primary_asset and not has_primary:
        raise ValidationError("primary asset required", field="primary")
    if background_type.requires_thumbnail and not has_thumbnail:
        raise ValidationError("thumbnail required for video", field="thumbnail")


class BackgroundService:
    """Orchestrates background CRUD against the record store and the asset store (DI)."""

    def __init__(self, repository: BackgroundRepository, asset_store: AssetStore):
        self._repository = repository
        self._assets = asset_store

    # ── Queries ──────────────────────────────────────────────────────

    async def get_background(self, background_id: str) -> Background:
        background = await self._repository.get_by_id(background_id)
        if background is None:
            raise EntityNotFoundError(_ENTITY, background_id)
        return background

    async def list_backgrounds(self) -> list[Background]:
        return await self._repository.get_all()

    # ── Create ───────────────────────────────────────────────────────

    async def create_background(
        self,
        data: BackgroundCreate,
        primary: AssetUpload | None = None,
        thumbnail: AssetUpload | None = None,
    ) -> Background:
        """Validate, upload the provided binaries, then persist the new record.

        If the primary upload succeeds and the thumbnail upload fails, the
        primary asset stays in the asset store with nothing referencing it.
        The error still propagates and no record is written.
        """
        plog.separator(f"Create background '{data.name}'")
        plog.step_start(LifecycleStage.VALIDATE, "Validating payload", type=data.type)

        name = _validate_name(data.name)
        background_type = _parse_type(data.type)
        _require_assets(background_type, primary is not None, thumbnail is not None)

        background = Background(
            name=name,
            type=background_type,
            style=data.style,
            primary_asset_url=data.primary_asset_url,
            thumbnail_asset_url=data.thumbnail_asset_url,
        )

        if primary is not None:
            background.attach_primary(await self._upload(primary, "primary"))

        if thumbnail is not None:
            try:
                background.attach_thumbnail(await self._upload(thumbnail, "thumbnail"))
            except UploadError:
                if background.primary_asset_handle:
                    plog.step_warning(
                        LifecycleStage.UPLOAD,
                        "Thumbnail upload failed; uploaded primary asset is now orphaned",
                        handle=background.primary_asset_handle,
                    )
                raise

        with plog.timed_step(LifecycleStage.PERSIST, "Inserting background", id=background.id):
            created = await self._repository.create(background)

        plog.step_complete(LifecycleStage.COMPLETE, f"Created '{created.name}'", id=created.id)
        return created

    # ── Update ───────────────────────────────────────────────────────

    async def update_background(
        self,
        background_id: str,
        data: BackgroundUpdate,
        primary: AssetUpload | None = None,
        thumbnail: AssetUpload | None = None,
    ) -> Background:
        """Apply a partial update, replacing assets when new binaries are given.

        Old assets are deleted only after the replacement is uploaded and the
        record has been committed, so a failed upload leaves the stored record
        and its assets untouched.
        """
        background = await self.get_background(background_id)
        plog.separator(f"Update background '{background.name}'")

        previous_handles = background.asset_handles()
        patch = data.model_dump(exclude_unset=True)

        plog.step_start(LifecycleStage.VALIDATE, "Merging patch", fields=sorted(patch) or "-")
        self._merge(background, patch)
        _require_assets(
            background.type,
            primary is not None or bool(background.primary_asset_url),
            thumbnail is not None or bool(background.thumbnail_asset_url),
        )

        uploaded: list[str] = []
        if primary is not None:
            stored = await self._upload(primary, "primary")
            uploaded.append(stored.handle)
            background.attach_primary(stored)
        if thumbnail is not None:
            try:
                stored = await self._upload(thumbnail, "thumbnail")
            except UploadError:
                await self._release_all(uploaded, reason="aborted update")
                raise
            uploaded.append(stored.handle)
            background.attach_thumbnail(stored)

        background.touch()
        with plog.timed_step(LifecycleStage.PERSIST, "Replacing background", id=background.id):
            updated = await self._repository.replace(background)

        if updated is None:
            # Removed concurrently; remove() already released the old assets.
            logger.warning("Background %s was removed while being updated", background_id)
            await self._release_all(uploaded, reason="record disappeared")
            raise EntityNotFoundError(_ENTITY, background_id)

        try:
            await self._repository.commit()
        except StorageError:
            await self._release_all(uploaded, reason="commit failed")
            raise

        current = set(updated.asset_handles())
        superseded = [h for h in previous_handles if h not in current]
        await self._release_all(superseded, reason="superseded")

        plog.step_complete(LifecycleStage.COMPLETE, f"Updated '{updated.name}'", id=updated.id)
        return updated

    @staticmethod
    def _merge(background: Background, patch: dict[str, Any]) -> None:
        """Overwrite only the fields present in ``patch``.

        Changing a URL always drops its handle: a client-supplied URL was
        never uploaded by us and must not be deleted later.
        """
        if "name" in patch:
            background.name = _validate_name(patch["name"])
        if "type" in patch:
            background.type = _parse_type(patch["type"])
        if "style" in patch:
            background.style = patch["style"]
        if "primary_asset_url" in patch:
            url = patch["primary_asset_url"] or None
            if url != background.primary_asset_url:
                background.primary_asset_url = url
                background.primary_asset_handle = None
        if "thumbnail_asset_url" in patch:
            url = patch["thumbnail_asset_url"] or None
            if url != background.thumbnail_asset_url:
                background.thumbnail_asset_url = url
                background.thumbnail_asset_handle = None

    # ── Remove ───────────────────────────────────────────────────────

    async def remove_background(self, background_id: str) -> dict[str, Any]:
        """Delete the record, then every asset it referenced."""
        removed = await self._repository.delete(background_id)
        if removed is None:
            raise EntityNotFoundError(_ENTITY, background_id)

        await self._repository.commit()

        plog.separator(f"Removed background '{removed.name}'")
        await self._release_all(removed.asset_handles(), reason="record removed")

        return {
            "deleted": True,
            "message": f"Background with ID {background_id} has been deleted.",
        }

    # ── Asset store helpers ──────────────────────────────────────────

    async def _upload(self, asset: AssetUpload, role: str) -> StoredAsset:
        with plog.timed_step(
            LifecycleStage.UPLOAD,
            f"Uploading {role} asset '{asset.filename}'",
            size_bytes=asset.size,
        ):
            stored = await self._assets.upload(asset)
        plog.detail(f"{role} asset stored", url=stored.url, handle=stored.handle)
        return stored

    async def _release_all(self, handles: list[str], *, reason: str) -> None:
        for handle in handles:
            plog.step_start(LifecycleStage.RELEASE, f"Deleting asset ({reason})", handle=handle)
            if await self._assets.delete(handle):
                plog.step_complete(LifecycleStage.RELEASE, "Asset deleted", handle=handle)
            else:
                plog.step_warning(
                    LifecycleStage.RELEASE,
                    f"Asset could not be deleted from {self._assets.provider_name}",
                    handle=handle,
                )
