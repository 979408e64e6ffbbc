"""HTTP tests for the /api/v1/background endpoints with in-memory fakes behind the service."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.application.services import BackgroundService
from app.infrastructure.dependencies import get_background_service
from app.main import app
from tests.fakes import FakeAssetStore, FakeBackgroundRepository

BASE = "/api/v1/background"


@pytest.fixture
def assets():
    """Install fakes behind the service dependency for the duration of a test."""
    store = FakeAssetStore(fail_uploads_for={"reject.png"})
    service = BackgroundService(FakeBackgroundRepository(), store)
    app.dependency_overrides[get_background_service] = lambda: service
    yield store
    app.dependency_overrides.clear()


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


def _video_files(name: str = "clip") -> dict:
    return {
        "primary": (f"{name}.mp4", b"mp4-bytes", "video/mp4"),
        "thumbnail": (f"{name}.jpg", b"jpg-bytes", "image/jpeg"),
    }


@pytest.mark.asyncio
async def test_create_gradient_and_list(assets: FakeAssetStore):
    async with _client() as client:
        created = await client.post(
            BASE, data={"name": "Rain", "type": "gradient", "style": "bg-blue-900"}
        )
        listed = await client.get(BASE)

    assert created.status_code == 201
    body = created.json()
    assert body["name"] == "Rain"
    assert body["type"] == "gradient"
    assert body["style"] == "bg-blue-900"
    assert body["src"] is None
    assert "primary_asset_handle" not in body

    assert listed.status_code == 200
    assert [b["_id"] for b in listed.json()] == [body["_id"]]


@pytest.mark.asyncio
async def test_create_video_with_both_files(assets: FakeAssetStore):
    async with _client() as client:
        response = await client.post(
            BASE, data={"name": "Lofi Cafe", "type": "video"}, files=_video_files()
        )

    assert response.status_code == 201
    body = response.json()
    assert body["src"] == "https://assets.test/1/clip.mp4"
    assert body["thumbnail"] == "https://assets.test/2/clip.jpg"
    assert assets.uploaded == ["clip.mp4", "clip.jpg"]


@pytest.mark.asyncio
async def test_create_image_without_file_is_bad_request(assets: FakeAssetStore):
    async with _client() as client:
        response = await client.post(BASE, data={"name": "Beach", "type": "image"})

    assert response.status_code == 400
    assert "primary asset required" in response.json()["detail"]


@pytest.mark.asyncio
async def test_create_rejects_non_media_file(assets: FakeAssetStore):
    async with _client() as client:
        response = await client.post(
            BASE,
            data={"name": "Notes", "type": "image"},
            files={"primary": ("notes.txt", b"hello", "text/plain")},
        )

    assert response.status_code == 400
    assert assets.uploaded == []


@pytest.mark.asyncio
async def test_create_upload_failure_is_bad_gateway(assets: FakeAssetStore):
    async with _client() as client:
        response = await client.post(
            BASE,
            data={"name": "Broken", "type": "image"},
            files={"primary": ("reject.png", b"png", "image/png")},
        )
        listed = await client.get(BASE)

    assert response.status_code == 502
    assert listed.json() == []


@pytest.mark.asyncio
async def test_update_with_new_primary_replaces_asset(assets: FakeAssetStore):
    async with _client() as client:
        created = (
            await client.post(BASE, data={"name": "Cafe", "type": "video"}, files=_video_files())
        ).json()
        response = await client.put(
            f"{BASE}/{created['_id']}",
            files={"primary": ("clip-v2.mp4", b"new-bytes", "video/mp4")},
        )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Cafe"
    assert body["src"] == "https://assets.test/3/clip-v2.mp4"
    assert body["thumbnail"] == created["thumbnail"]
    assert assets.delete_calls == ["fake/1"]


@pytest.mark.asyncio
async def test_update_fields_only(assets: FakeAssetStore):
    async with _client() as client:
        created = (await client.post(BASE, data={"name": "Rain", "type": "solid"})).json()
        response = await client.put(f"{BASE}/{created['_id']}", data={"style": "bg-slate-800"})

    assert response.status_code == 200
    assert response.json()["style"] == "bg-slate-800"
    assert response.json()["name"] == "Rain"


@pytest.mark.asyncio
async def test_update_unknown_id_is_not_found(assets: FakeAssetStore):
    async with _client() as client:
        response = await client.put(f"{BASE}/missing", data={"name": "X"})

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_unknown_id_is_not_found(assets: FakeAssetStore):
    async with _client() as client:
        response = await client.get(f"{BASE}/missing")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_twice(assets: FakeAssetStore):
    async with _client() as client:
        created = (
            await client.post(BASE, data={"name": "Cafe", "type": "video"}, files=_video_files())
        ).json()
        first = await client.delete(f"{BASE}/{created['_id']}")
        second = await client.delete(f"{BASE}/{created['_id']}")

    assert first.status_code == 200
    assert first.json()["deleted"] is True
    assert second.status_code == 404
    assert assets.delete_calls == ["fake/1", "fake/2"]


@pytest.mark.asyncio
async def test_list_uses_selector_field_names(assets: FakeAssetStore):
    async with _client() as client:
        await client.post(BASE, data={"name": "Cafe", "type": "video"}, files=_video_files())
        listed = await client.get(BASE)

    (item,) = listed.json()
    assert set(item) == {
        "_id", "name", "type", "src", "thumbnail", "style", "created_at", "updated_at",
    }
    assert item["type"] == "video"
    assert item["src"] == "https://assets.test/1/clip.mp4"
    assert item["thumbnail"] == "https://assets.test/2/clip.jpg"
