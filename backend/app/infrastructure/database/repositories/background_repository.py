"""Concrete repository implementation for Background backed by SQLAlchemy."""

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces import BackgroundRepository
from app.domain.entities import Background, BackgroundType
from app.domain.exceptions import StorageError
from app.infrastructure.database.models import BackgroundModel


class SQLAlchemyBackgroundRepository(BackgroundRepository):
    """Implements the BackgroundRepository port using SQLAlchemy async sessions.

    Any SQLAlchemy failure is re-raised as ``StorageError``.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: BackgroundModel) -> Background:
        """Map ORM model → domain entity."""
        return Background(
            id=model.id,
            name=model.name,
            type=BackgroundType(model.type),
            primary_asset_url=model.primary_asset_url,
            primary_asset_handle=model.primary_asset_handle,
            thumbnail_asset_url=model.thumbnail_asset_url,
            thumbnail_asset_handle=model.thumbnail_asset_handle,
            style=model.style,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Background) -> BackgroundModel:
        """Map domain entity → ORM model (for creation)."""
        return BackgroundModel(
            id=entity.id,
            name=entity.name,
            type=entity.type.value,
            primary_asset_url=entity.primary_asset_url,
            primary_asset_handle=entity.primary_asset_handle,
            thumbnail_asset_url=entity.thumbnail_asset_url,
            thumbnail_asset_handle=entity.thumbnail_asset_handle,
            style=entity.style,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def get_by_id(self, background_id: str) -> Background | None:
        try:
            model = await self._session.get(BackgroundModel, background_id)
        except SQLAlchemyError as exc:
            raise StorageError("read", str(exc)) from exc
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[Background]:
        stmt = select(BackgroundModel).order_by(BackgroundModel.created_at.asc())
        try:
            result = await self._session.execute(stmt)
        except SQLAlchemyError as exc:
            raise StorageError("list", str(exc)) from exc
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, background: Background) -> Background:
        model = self._to_model(background)
        try:
            self._session.add(model)
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError("insert", str(exc)) from exc
        return self._to_entity(model)

    async def replace(self, background: Background) -> Background | None:
        try:
            model = await self._session.get(BackgroundModel, background.id)
            if model is None:
                return None
            model.name = background.name
            model.type = background.type.value
            model.primary_asset_url = background.primary_asset_url
            model.primary_asset_handle = background.primary_asset_handle
            model.thumbnail_asset_url = background.thumbnail_asset_url
            model.thumbnail_asset_handle = background.thumbnail_asset_handle
            model.style = background.style
            model.updated_at = background.updated_at
            await self._session.flush()
        except SQLAlchemyError as exc:
            raise StorageError("replace", str(exc)) from exc
        return self._to_entity(model)

    async def delete(self, background_id: str) -> Background | None:
        """Delete-and-fetch in one ``DELETE ... RETURNING`` statement.

        Of two concurrent deletes for the same id only one gets the row back.
        """
        stmt = (
            delete(BackgroundModel)
            .where(BackgroundModel.id == background_id)
            .returning(BackgroundModel)
        )
        try:
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageError("delete", str(exc)) from exc
        return self._to_entity(model) if model else None

    async def commit(self) -> None:
        try:
            await self._session.commit()
        except SQLAlchemyError as exc:
            await self._session.rollback()
            raise StorageError("commit", str(exc)) from exc
