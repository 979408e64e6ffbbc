"""Integration tests for SQLAlchemyBackgroundRepository against in-memory SQLite."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.domain.entities import Background, BackgroundType
from app.infrastructure.database import Base
from app.infrastructure.database.repositories import SQLAlchemyBackgroundRepository


async def _session_factory(url: str = "sqlite+aiosqlite:///:memory:") -> async_sessionmaker[AsyncSession]:
    if url.endswith(":memory:"):
        engine = create_async_engine(url, poolclass=StaticPool)
    else:
        engine = create_async_engine(url)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def _video() -> Background:
    return Background(
        name="Lofi Cafe",
        type=BackgroundType.VIDEO,
        primary_asset_url="https://res.cloudinary.com/demo/video/upload/v1/backgrounds/cafe.mp4",
        primary_asset_handle="video/backgrounds/cafe",
        thumbnail_asset_url="https://res.cloudinary.com/demo/image/upload/v1/backgrounds/cafe.jpg",
        thumbnail_asset_handle="image/backgrounds/cafe",
    )


@pytest.mark.asyncio
async def test_create_and_get_round_trip():
    factory = await _session_factory()
    async with factory() as session:
        repo = SQLAlchemyBackgroundRepository(session)
        created = await repo.create(_video())
        await session.commit()

    async with factory() as session:
        repo = SQLAlchemyBackgroundRepository(session)
        loaded = await repo.get_by_id(created.id)

    assert loaded is not None
    assert loaded.type is BackgroundType.VIDEO
    assert loaded.primary_asset_handle == "video/backgrounds/cafe"
    assert loaded.thumbnail_asset_handle == "image/backgrounds/cafe"


@pytest.mark.asyncio
async def test_get_all_returns_creation_order():
    factory = await _session_factory()
    async with factory() as session:
        repo = SQLAlchemyBackgroundRepository(session)
        for name in ("One", "Two", "Three"):
            await repo.create(Background(name=name, type=BackgroundType.SOLID, style="bg-black"))
        await session.commit()

        names = [b.name for b in await repo.get_all()]

    assert names == ["One", "Two", "Three"]


@pytest.mark.asyncio
async def test_replace_overwrites_fields_and_reports_missing():
    factory = await _session_factory()
    async with factory() as session:
        repo = SQLAlchemyBackgroundRepository(session)
        created = await repo.create(_video())

        created.name = "Night Cafe"
        created.primary_asset_url = "https://cdn.example.com/night.mp4"
        created.primary_asset_handle = None
        replaced = await repo.replace(created)

        assert replaced is not None
        assert replaced.name == "Night Cafe"
        assert replaced.primary_asset_handle is None

        ghost = Background(name="Ghost", type=BackgroundType.SOLID)
        assert await repo.replace(ghost) is None


@pytest.mark.asyncio
async def test_delete_returns_removed_record_once():
    factory = await _session_factory()
    async with factory() as session:
        repo = SQLAlchemyBackgroundRepository(session)
        created = await repo.create(_video())

        removed = await repo.delete(created.id)
        assert removed is not None
        assert removed.asset_handles() == ["video/backgrounds/cafe", "image/backgrounds/cafe"]

        assert await repo.delete(created.id) is None
        assert await repo.get_by_id(created.id) is None


@pytest.mark.asyncio
async def test_delete_after_concurrent_delete_returns_none(tmp_path):
    factory = await _session_factory(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    async with factory() as session:
        created = await SQLAlchemyBackgroundRepository(session).create(_video())
        await session.commit()

    async with factory() as late, factory() as early:
        late_repo = SQLAlchemyBackgroundRepository(late)
        # The late caller has already seen the row before the other delete lands.
        assert await late_repo.get_by_id(created.id) is not None

        early_repo = SQLAlchemyBackgroundRepository(early)
        assert await early_repo.delete(created.id) is not None
        await early_repo.commit()

        assert await late_repo.delete(created.id) is None


@pytest.mark.asyncio
async def test_commit_makes_delete_visible_to_other_sessions():
    factory = await _session_factory()
    async with factory() as session:
        repo = SQLAlchemyBackgroundRepository(session)
        created = await repo.create(_video())
        await repo.commit()
        await repo.delete(created.id)
        await repo.commit()

    async with factory() as session:
        assert await SQLAlchemyBackgroundRepository(session).get_by_id(created.id) is None
